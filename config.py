"""
Configuration loading for the RMQ/LCA command line.

Settings live in a YAML file (default `config.yaml`); anything missing
falls back to DEFAULT_CONFIG.
"""

import copy
import logging
import os
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG = {
    'sparse_table': {
        'layout': 'flat',
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge `override` into a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = DEFAULT_CONFIG_PATH) -> Dict:
    """
    Load configuration, filling gaps from DEFAULT_CONFIG.

    Args:
        config_path: Path to a YAML file; None or a missing file gives defaults

    Returns:
        Configuration dict
    """
    if not config_path or not os.path.exists(config_path):
        logger.warning(f"No config file found at {config_path}, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    logger.info(f"Loaded config from {config_path}")
    return _merge(DEFAULT_CONFIG, config)


def configure_logging(config: Dict):
    """Set up root logging from the 'logging' section of a config."""
    settings = config.get('logging', DEFAULT_CONFIG['logging'])
    logging.basicConfig(
        level=getattr(logging, str(settings.get('level', 'INFO')).upper(), logging.INFO),
        format=settings.get('format', DEFAULT_CONFIG['logging']['format']),
    )
