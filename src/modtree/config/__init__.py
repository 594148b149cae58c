"""Configuration module: load loader, output and logging settings."""

from .manager import load_config
from .paths import get_defaults_path, get_user_config_path, get_project_config_path

__all__ = ["load_config", "get_defaults_path", "get_user_config_path", "get_project_config_path"]
