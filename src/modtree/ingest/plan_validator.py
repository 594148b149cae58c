"""Validate Terraform plan JSON structure."""

from typing import Dict, Any
from ..utils.errors import PlanLoadError
from ..utils.logging import get_logger

logger = get_logger("ingest.plan_validator")

SUPPORTED_FORMAT_VERSIONS = ["1.0", "1.1", "1.2"]


def validate_plan_structure(plan_data: Dict[str, Any]) -> None:
    """
    Validate Terraform plan JSON structure.
    
    Args:
        plan_data: Parsed Terraform plan JSON
        
    Raises:
        PlanLoadError: If plan structure is invalid
    """
    if not isinstance(plan_data, dict):
        raise PlanLoadError("Plan JSON must be a dictionary.")
    
    if "format_version" not in plan_data:
        raise PlanLoadError(
            "Plan JSON missing required field: format_version. "
            "This doesn't appear to be Terraform JSON output."
        )
    
    format_version = plan_data["format_version"]
    if not isinstance(format_version, str):
        raise PlanLoadError("Plan 'format_version' must be a string.")
    
    version_major_minor = ".".join(format_version.split(".")[:2])
    if version_major_minor not in SUPPORTED_FORMAT_VERSIONS:
        logger.warning(
            f"Plan format version '{format_version}' may not be fully supported. "
            f"Supported versions: {', '.join(SUPPORTED_FORMAT_VERSIONS)}"
        )
    
    configuration = plan_data.get("configuration")
    if not isinstance(configuration, dict):
        raise PlanLoadError(
            "Plan JSON has no 'configuration' object. "
            "Module structure is only present in 'terraform show -json <planfile>' output."
        )
    
    root_module = configuration.get("root_module", {})
    if not isinstance(root_module, dict):
        raise PlanLoadError("Plan 'configuration.root_module' must be an object.")
    
    module_calls = root_module.get("module_calls", {})
    if not isinstance(module_calls, dict):
        raise PlanLoadError("Plan 'configuration.root_module.module_calls' must be an object.")
    
    for field in ("resource_changes",):
        if field in plan_data and not isinstance(plan_data[field], list):
            raise PlanLoadError(f"Plan '{field}' must be a list.")
    
    logger.debug("Plan structure validation passed")


def count_module_calls(module_config: Dict[str, Any]) -> int:
    """Count module calls in a configuration module, recursively."""
    total = 0
    for call in module_config.get("module_calls", {}).values():
        total += 1 + count_module_calls(call.get("module", {}))
    return total
