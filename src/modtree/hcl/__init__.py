"""Module tree model: modules, calls, instance identity and warnings."""

from .block import Block
from .identity import parse_index, parse_key, format_instance_name, strip_instance
from .module import Module, ModuleCall
from .warnings import ModuleWarning, WarningCode, MissingVarsData, new_missing_vars_warning

__all__ = [
    "Block",
    "Module",
    "ModuleCall",
    "ModuleWarning",
    "WarningCode",
    "MissingVarsData",
    "new_missing_vars_warning",
    "parse_index",
    "parse_key",
    "format_instance_name",
    "strip_instance",
]
