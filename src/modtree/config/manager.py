"""Layered configuration manager (defaults + user + project + explicit file)."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from .paths import get_defaults_path, get_user_config_path, get_project_config_path
from ..utils.errors import ConfigError
from ..utils.logging import get_logger

logger = get_logger("config.manager")


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping; an empty file is an empty mapping."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}") from e
    
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the full config tree.
    
    Later layers override earlier ones: packaged defaults, user config,
    project config, then ``config_path``.
    
    Args:
        config_path: Optional explicit config file
        
    Returns:
        Merged configuration dictionary
        
    Raises:
        ConfigError: If the defaults or an explicit config file cannot be loaded
    """
    config = _read_yaml(get_defaults_path())
    
    user_config_path = get_user_config_path()
    if user_config_path.exists():
        try:
            _deep_merge(config, _read_yaml(user_config_path))
        except ConfigError as e:
            logger.warning(f"Could not load user config: {e}")
    
    project_config_path = get_project_config_path()
    if project_config_path:
        try:
            _deep_merge(config, _read_yaml(project_config_path))
            logger.info(f"Loaded project config from {project_config_path}")
        except ConfigError as e:
            logger.warning(f"Could not load project config: {e}")
    
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        _deep_merge(config, _read_yaml(path))
        logger.info(f"Loaded configuration from {config_path}")
    
    _validate(config)
    return config


def _validate(config: Dict[str, Any]) -> None:
    for section in ("loader", "output", "logging"):
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
