# Folder: copycat/
# File: config.py
import os
import copy
import logging
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# --- Global Configuration Dictionary ---
# Defaults for every tunable; a YAML file may override any subset of them.
CONFIG: Dict[str, Any] = {
    'run': {
        'seed': None,            # None seeds from the clock
        'step_delay': 0.0,       # Seconds to sleep between ticks
        'max_ticks': None,       # None runs until an answer is found
        'batch_size': 100,       # Default number of runs in batch mode
    },
    'coderack': {
        'max_codelets': 100,     # Pending codelets before eviction kicks in
    },
    'temperature': {
        'initial_clamp_time': 30,
    },
    'slipnet': {
        'unclamp_time': 245,     # Tick at which the initial clamps are released
    },
    'logging': {
        'level': 'INFO',
    },
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be interpreted."""


def deep_merge(dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges dict2 into dict1 (in place) and returns dict1."""
    for k, v in dict2.items():
        if k in dict1 and isinstance(dict1[k], dict) and isinstance(v, dict):
            deep_merge(dict1[k], v)
        else:
            dict1[k] = v
    return dict1


def load_config(config_path: Optional[str] = 'config.yaml') -> Dict[str, Any]:
    """
    Loads configuration from a YAML file, merging it over a copy of the default CONFIG.
    Args:
        config_path (str): Path to the YAML file. A missing file yields the defaults.
    Returns:
        Dict[str, Any]: The merged configuration.
    Raises:
        ConfigError: If the file's top level is not a mapping.
    """
    config = copy.deepcopy(CONFIG)
    if config_path and os.path.exists(config_path):
        with open(config_path, 'r') as f:
            yaml_config = yaml.safe_load(f)
        if yaml_config is None:
            yaml_config = {}
        if not isinstance(yaml_config, dict):
            raise ConfigError(f"Top level of {config_path} must be a mapping, got {type(yaml_config).__name__}.")
        deep_merge(config, yaml_config)
        logger.info(f"Configuration loaded from {config_path}.")
    else:
        logger.warning(f"Config file not found at {config_path}. Using default configuration.")
    return config


def setup_logging(level: str = 'INFO'):
    """Configures the root logger with the project's log format."""
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
