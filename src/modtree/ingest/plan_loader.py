"""Load and validate Terraform plan JSON."""

import json
from pathlib import Path
from typing import Dict, Any
from .plan_validator import validate_plan_structure, count_module_calls
from ..utils.errors import PlanLoadError
from ..utils.logging import get_logger

logger = get_logger("ingest.plan_loader")


def load_plan_json(plan_path: str) -> Dict[str, Any]:
    """
    Load and validate Terraform plan JSON file.
    
    Args:
        plan_path: Path to JSON produced by 'terraform show -json <planfile>'
        
    Returns:
        Parsed and validated plan data
        
    Raises:
        PlanLoadError: If file cannot be loaded or is invalid
    """
    path = Path(plan_path)
    
    if not path.exists():
        raise PlanLoadError(
            f"Plan file not found: {plan_path}. "
            "Generate one using: terraform show -json plan.tfplan > plan.json"
        )
    
    if not path.is_file():
        raise PlanLoadError(f"Path is not a file: {plan_path}.")
    
    try:
        with open(path, 'r', encoding='utf-8') as f:
            plan_data = json.load(f)
    except json.JSONDecodeError as e:
        raise PlanLoadError(f"Invalid JSON in plan file: {e}.")
    except OSError as e:
        raise PlanLoadError(f"Error reading plan file: {e}.")
    
    try:
        validate_plan_structure(plan_data)
    except PlanLoadError as e:
        raise PlanLoadError(f"Invalid Terraform plan structure: {e}") from e
    
    plan_data.setdefault("resource_changes", [])
    
    root_module = plan_data["configuration"].get("root_module", {})
    logger.info(
        f"Loaded Terraform plan from {plan_path} "
        f"(version: {plan_data.get('terraform_version', 'unknown')}, "
        f"module calls: {count_module_calls(root_module)})"
    )
    
    return plan_data
