"""Read Terraform variable inputs: JSON var files and name=value assignments."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple
from ..utils.errors import VarFileError
from ..utils.logging import get_logger

logger = get_logger("ingest.var_files")


def parse_var_assignment(assignment: str) -> Tuple[str, str]:
    """
    Parse a ``--terraform-var`` value of the form ``name=value``.
    
    Raises:
        VarFileError: If there is no '=' or the name is empty
    """
    name, sep, value = assignment.partition("=")
    name = name.strip()
    if not sep or not name:
        raise VarFileError(f"Invalid variable assignment '{assignment}', expected name=value")
    return name, value


def load_var_files(paths: Iterable[str]) -> Dict[str, Any]:
    """
    Load variable values from JSON var files; later files override earlier ones.
    
    Args:
        paths: Paths to ``*.tfvars.json`` files
        
    Returns:
        Merged variable values
        
    Raises:
        VarFileError: If a file is missing, unreadable or not a JSON object
    """
    values: Dict[str, Any] = {}
    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            raise VarFileError(f"Variable file not found: {raw_path}")
        if not path.name.endswith(".json"):
            raise VarFileError(
                f"Unsupported variable file: {raw_path}. Only JSON var files (*.tfvars.json) are supported."
            )
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise VarFileError(f"Invalid JSON in variable file {raw_path}: {e}") from e
        except OSError as e:
            raise VarFileError(f"Error reading variable file {raw_path}: {e}") from e
        
        if not isinstance(data, dict):
            raise VarFileError(f"Variable file {raw_path} must contain a JSON object")
        
        values.update(data)
        logger.debug(f"Loaded {len(data)} variables from {raw_path}")
    
    return values
