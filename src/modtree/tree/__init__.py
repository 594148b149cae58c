"""Build module trees from Terraform JSON output."""

from .loader import ModuleLoader, load_module_tree
from .sources import resolve_source_url, is_local_source

__all__ = ["ModuleLoader", "load_module_tree", "resolve_source_url", "is_local_source"]
