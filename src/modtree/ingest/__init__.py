"""Ingest layer - load Terraform plan JSON and variable inputs."""

from .plan_loader import load_plan_json
from .var_files import load_var_files, parse_var_assignment

__all__ = ["load_plan_json", "load_var_files", "parse_var_assignment"]
