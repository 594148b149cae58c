"""Human-friendly output formatter - renders a module tree and its warnings."""

import os
from typing import List, Optional, Tuple
from ..hcl.module import Module
from ..hcl.warnings import ModuleWarning


def _use_ascii(ascii_mode: Optional[bool] = None) -> bool:
    """Resolve whether to use ASCII output (checked at format time)."""
    if ascii_mode is not None:
        return bool(ascii_mode)
    return os.environ.get("MODTREE_ASCII", "").lower() in ("1", "true", "yes")


def _section(title: str, width: int = 65) -> List[str]:
    """Return section divider."""
    h = "-" * width
    return [h, title.center(width), h]


def collect_warnings(root: Module) -> List[Tuple[str, ModuleWarning]]:
    """
    Gather warnings from every module under ``root``.
    
    The tree keeps warnings on the module that raised them; this is the
    explicit rollup used for reporting.
    
    Returns:
        (module label, warning) pairs in depth-first order
    """
    collected = []
    for module in root.walk():
        label = module.address or module.name
        for warning in module.warnings:
            collected.append((label, warning))
    return collected


def _module_label(module: Module) -> str:
    parts = [module.name]
    if module.source and not module.is_root:
        parts.append(f"({module.source})")
    if module.has_changes:
        parts.append("*")
    if module.warnings:
        count = len(module.warnings)
        parts.append(f"[{count} warning{'s' if count != 1 else ''}]")
    return " ".join(parts)


def _render_children(module: Module, prefix: str, ascii_mode: bool, lines: List[str]) -> None:
    branch, last, pipe = ("|-- ", "`-- ", "|   ") if ascii_mode else ("├── ", "└── ", "│   ")
    for i, child in enumerate(module.modules):
        is_last = i == len(module.modules) - 1
        lines.append(prefix + (last if is_last else branch) + _module_label(child))
        _render_children(child, prefix + ("    " if is_last else pipe), ascii_mode, lines)


def format_tree(root: Module, ascii_mode: Optional[bool] = None) -> str:
    """
    Render the module tree as indented text.
    
    Args:
        root: Root module
        ascii_mode: Force ASCII connectors (defaults to MODTREE_ASCII)
        
    Returns:
        Multi-line string; modules with pending changes are marked with '*'
    """
    ascii_mode = _use_ascii(ascii_mode)
    lines = [_module_label(root)]
    _render_children(root, "", ascii_mode, lines)
    
    warnings = collect_warnings(root)
    if warnings:
        lines.append("")
        lines.extend(format_warnings(root).splitlines())
    return "\n".join(lines)


def format_warnings(root: Module) -> str:
    """Render every warning in the tree, grouped under its module."""
    warnings = collect_warnings(root)
    if not warnings:
        return "No warnings."
    
    lines = _section(f"WARNINGS ({len(warnings)})")
    current = None
    for label, warning in warnings:
        if label != current:
            lines.append("")
            lines.append(f"{label}:")
            current = label
        lines.append(f"  {warning.title}: {warning.friendly_message}")
    return "\n".join(lines)
