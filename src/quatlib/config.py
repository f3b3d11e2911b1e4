"""
===============================================================================
QUATLIB - Configuration
===============================================================================
YAML configuration for the command line tool and logging. The algebra
itself takes no configuration; its numeric constants live in
core/constants.py.

File layout (every key optional):

    logging:
      level: INFO
      format: '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    output:
      precision: 6
===============================================================================
"""

import copy
import logging
import sys
from pathlib import Path
from typing import Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'logging': {
        'level': 'WARNING',
        'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    },
    'output': {
        'precision': 6,
    },
}


def load_config(config_path: Optional[Union[str, Path]] = None) -> dict:
    """
    Load configuration from a YAML file merged over the defaults.

    Args:
        config_path: Path to a YAML file. None returns the defaults.

    Returns:
        Configuration dictionary with the 'logging' and 'output' sections.

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the file is not a mapping or has unknown keys
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from: %s", path)
    with open(path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration root must be a mapping, got "
                         f"{type(loaded).__name__}")

    for section, values in loaded.items():
        if section not in config:
            raise ValueError(f"Unknown configuration section: {section}. "
                             f"Valid: {list(config.keys())}")
        if not isinstance(values, dict):
            raise ValueError(f"Section '{section}' must be a mapping")
        for key, value in values.items():
            if key not in config[section]:
                raise ValueError(f"Unknown key '{key}' in section '{section}'. "
                                 f"Valid: {list(config[section].keys())}")
            config[section][key] = value

    return config


def configure_logging(config: dict) -> None:
    """
    Configure the root logger from the 'logging' section.

    Raises:
        ValueError: If the configured level is not a logging level name
    """
    level_name = str(config['logging']['level']).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {level_name}")

    logging.basicConfig(
        level=level,
        format=config['logging']['format'],
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
