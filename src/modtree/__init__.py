"""modtree - Terraform module tree, instance addressing and diagnostics."""

from typing import Any, Dict, Iterable, Optional
from .hcl import Module, ModuleCall, ModuleWarning, WarningCode, new_missing_vars_warning
from .config import load_config
from .utils.logging import setup_logging, get_logger
from .utils.errors import ModTreeError

__version__ = "0.1.0"

__all__ = [
    "build_tree",
    "Module",
    "ModuleCall",
    "ModuleWarning",
    "WarningCode",
    "new_missing_vars_warning",
]

setup_logging()
logger = get_logger("modtree")


def build_tree(
    plan_json_path: str,
    root_path: Optional[str] = None,
    var_files: Iterable[str] = (),
    vars: Optional[Iterable[str]] = None,
    module_suffix: Optional[str] = None,
    config_path: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Module:
    """Load a Terraform plan JSON file and return its verified module tree.

    ``config`` is an already loaded configuration; when omitted the layered
    configuration is read from ``config_path``.
    """
    from .tree.loader import load_module_tree
    from .graph.module_graph import verify_tree
    
    try:
        logger.info(f"Building module tree from plan: {plan_json_path}")
        if config is None:
            config = load_config(config_path)
        root = load_module_tree(
            plan_json_path,
            root_path=root_path,
            var_files=var_files,
            vars=vars,
            module_suffix=module_suffix,
            settings=config.get("loader", {}),
        )
        verify_tree(root)
        return root
    except ModTreeError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error while building module tree: {e}", exc_info=True)
        raise ModTreeError(f"Building module tree failed: {e}") from e
