"""
Configuration loading for GenEvolve.

Configurations are YAML files. A bare name such as ``default`` is resolved
against the ``genevolve/config/`` directory shipped with the package, then
against ``config/`` in the working directory. A file carrying a ``defaults``
key is deep-merged over the packaged ``default_config.yaml``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default_config.yaml"


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to a YAML file, or a config name under genevolve/config/

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If no matching file exists
    """
    config_file = Path(config_path)

    if not config_file.exists():
        possible_paths = [
            CONFIG_DIR / f"{config_path}_config.yaml",
            CONFIG_DIR / f"{config_path}.yaml",
            Path("config") / f"{config_path}_config.yaml",
        ]

        for path in possible_paths:
            if path.exists():
                config_file = path
                break
        else:
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}. "
                f"Tried: {[str(p) for p in possible_paths]}"
            )

    logger.info(f"Loading configuration from: {config_file}")

    with open(config_file, 'r') as f:
        config = yaml.safe_load(f) or {}

    if 'defaults' in config:
        if DEFAULT_CONFIG_PATH.exists() and config_file.resolve() != DEFAULT_CONFIG_PATH.resolve():
            with open(DEFAULT_CONFIG_PATH, 'r') as f:
                default_config = yaml.safe_load(f) or {}
            config = deep_merge(default_config, config)
        del config['defaults']

    return config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Dictionary with override values

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result
