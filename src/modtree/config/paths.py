"""Config path resolution for the layered config system."""

from pathlib import Path
from typing import Optional


def get_defaults_path() -> Path:
    """Packaged defaults shipped with modtree."""
    return Path(__file__).parent / "defaults.yaml"


def get_user_config_path() -> Path:
    """Get user config path: ~/.modtree/config.yaml"""
    return Path.home() / ".modtree" / "config.yaml"


def get_project_config_path() -> Optional[Path]:
    """Get project config path: .modtree/config.yaml (from current working directory)"""
    project_config = Path.cwd() / ".modtree" / "config.yaml"
    if project_config.exists():
        return project_config
    return None
