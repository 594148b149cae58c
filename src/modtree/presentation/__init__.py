"""Presentation layer - human-friendly formatting."""

from .human_formatter import format_tree, format_warnings, collect_warnings

__all__ = ["format_tree", "format_warnings", "collect_warnings"]
