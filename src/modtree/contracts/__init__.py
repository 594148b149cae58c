from .tree_output import TreeOutput, ModuleNode, WarningOutput, build_tree_output

__all__ = [
    "TreeOutput",
    "ModuleNode",
    "WarningOutput",
    "build_tree_output",
]
