"""Tests for the demo command line."""

import pytest

from demo import load_tree, main, parse_vertex


@pytest.fixture
def no_config(tmp_path):
    return ['--config', str(tmp_path / 'absent.yaml')]


def test_demo_mode(no_config, capsys):
    assert main(['--mode', 'demo'] + no_config) == 0
    out = capsys.readouterr().out
    assert 'RMQ(0, 4) = index 2 (value 1)' in out
    assert 'RMQ(3, 4) = index 4 (value 3)' in out
    assert 'LCA(3, 2) = 0' in out
    assert 'LCA(3, 1) = 1' in out


def test_rmq_mode(no_config, capsys):
    argv = ['--mode', 'rmq', '--values', '2', '5', '1', '4', '3',
            '--range', '1', '3', '--layout', 'indexed'] + no_config
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert 'Layout: indexed' in out
    assert 'RMQ(1, 3) = index 2 (value 1)' in out


def test_rmq_mode_defaults_to_full_range(no_config, capsys):
    main(['--mode', 'rmq', '--values', '9', '3', '7'] + no_config)
    assert 'RMQ(0, 2) = index 1 (value 3)' in capsys.readouterr().out


def test_rmq_invalid_range_exits(no_config):
    with pytest.raises(SystemExit) as excinfo:
        main(['--mode', 'rmq', '--values', '1', '2', '--range', '1', '0'] + no_config)
    assert excinfo.value.code == 2


def test_lca_mode(tmp_path, no_config, capsys):
    tree_file = tmp_path / 'tree.yaml'
    tree_file.write_text("root: 0\ntree:\n  0: [1, 2]\n  1: [3]\n")
    assert main(['--mode', 'lca', '--tree', str(tree_file),
                 '--pair', '3', '2', '--pair', '3', '1'] + no_config) == 0
    out = capsys.readouterr().out
    assert 'Euler tour: [0, 1, 3, 1, 0, 2, 0]' in out
    assert 'LCA(3, 2) = 0 (depth 0, distance 3)' in out
    assert 'LCA(3, 1) = 1 (depth 1, distance 1)' in out


def test_lca_unknown_vertex_exits(tmp_path, no_config):
    tree_file = tmp_path / 'tree.json'
    tree_file.write_text('{"a": ["b", "c"]}')
    with pytest.raises(SystemExit):
        main(['--mode', 'lca', '--tree', str(tree_file), '--pair', 'b', 'z'] + no_config)


def test_lca_requires_tree(no_config):
    with pytest.raises(SystemExit):
        main(['--mode', 'lca'] + no_config)


def test_load_tree_plain_mapping(tmp_path):
    tree_file = tmp_path / 'tree.yaml'
    tree_file.write_text("a: [b, c]\nb: [d]\n")
    assert load_tree(str(tree_file)) == ({'a': ['b', 'c'], 'b': ['d']}, None)


def test_parse_vertex():
    assert parse_vertex('3') == 3
    assert parse_vertex('Einstein') == 'Einstein'


def test_lca_mode_numeric_json_tree(tmp_path, no_config, capsys):
    tree_file = tmp_path / 'tree.json'
    tree_file.write_text('{"0": [1, 2], "1": [3]}')
    assert main(['--mode', 'lca', '--tree', str(tree_file), '--pair', '3', '2'] + no_config) == 0
    out = capsys.readouterr().out
    assert 'Euler tour: [0, 1, 3, 1, 0, 2, 0]' in out
    assert 'LCA(3, 2) = 0' in out


def test_load_tree_normalises_json_keys(tmp_path):
    tree_file = tmp_path / 'tree.json'
    tree_file.write_text('{"root": "0", "tree": {"0": [1, 2], "1": ["3"]}}')
    assert load_tree(str(tree_file)) == ({0: [1, 2], 1: [3]}, 0)


def test_missing_tree_file_exits(tmp_path, no_config):
    with pytest.raises(SystemExit) as excinfo:
        main(['--mode', 'lca', '--tree', str(tmp_path / 'absent.yaml')] + no_config)
    assert excinfo.value.code == 2


def test_malformed_tree_file_exits(tmp_path, no_config):
    tree_file = tmp_path / 'tree.yaml'
    tree_file.write_text("0: [1, 2\n1: [3]\n")
    with pytest.raises(SystemExit) as excinfo:
        main(['--mode', 'lca', '--tree', str(tree_file)] + no_config)
    assert excinfo.value.code == 2
