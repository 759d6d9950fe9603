"""Tests for configuration loading."""

import logging

import pytest

from config import DEFAULT_CONFIG, configure_logging, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / 'absent.yaml'))
    assert config == DEFAULT_CONFIG
    config['sparse_table']['layout'] = 'indexed'
    assert DEFAULT_CONFIG['sparse_table']['layout'] == 'flat'


def test_none_path_gives_defaults():
    assert load_config(None) == DEFAULT_CONFIG


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('')
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_file_overrides_are_merged(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("sparse_table:\n  layout: indexed\nlogging:\n  level: DEBUG\n")
    config = load_config(str(path))
    assert config['sparse_table']['layout'] == 'indexed'
    assert config['logging']['level'] == 'DEBUG'
    assert config['logging']['format'] == DEFAULT_CONFIG['logging']['format']


def test_non_mapping_config_is_rejected(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_configure_logging_sets_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.update(kwargs))
    configure_logging({'logging': {'level': 'debug', 'format': '%(message)s'}})
    assert calls == {'level': logging.DEBUG, 'format': '%(message)s'}
