"""
JSON configuration shared by the AGC components
"""
import os
import json
from typing import Any, Optional

CONFIG_ENV_VAR = 'DAGC_CONFIG'
# Shipped inside the package so installed console scripts find it
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'dagc.config.json')

config_data = None


def config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def reload_config(path: Optional[str] = None) -> dict:
    """Read the configuration file, from `path`, $DAGC_CONFIG or the packaged default"""
    global config_data
    with open(path or config_path(), 'r') as file:
        config_data = json.load(file)
    return config_data


def get_config(key_path: Optional[str] = None) -> Any:
    """
    Look up a dotted key such as 'agc.target_rms'; without a key the whole config is returned

    Raises:
        ValueError: the key path does not exist
    """
    if config_data is None:
        reload_config()

    if key_path is None:
        return config_data

    node = config_data
    for key in key_path.split('.'):
        if not isinstance(node, dict) or key not in node:
            raise ValueError(f"Key {key_path} not found in config")
        node = node[key]
    return node
