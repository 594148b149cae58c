"""Custom exception classes for modtree."""


class ModTreeError(Exception):
    """Base exception for all modtree errors."""
    pass


class PlanLoadError(ModTreeError):
    """Raised when Terraform plan JSON cannot be loaded or is invalid."""
    pass


class VarFileError(ModTreeError):
    """Raised when a Terraform variable file or assignment cannot be read."""
    pass


class TreeError(ModTreeError):
    """Raised when the module tree would become inconsistent."""
    pass


class ConfigError(ModTreeError):
    """Raised when configuration is invalid or missing."""
    pass
