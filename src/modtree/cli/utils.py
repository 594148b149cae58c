"""Shared CLI options and helpers."""

import os
from typing import Any, Callable, Optional, Tuple
import click
from ..config import load_config
from ..hcl.module import Module
from ..utils.logging import get_logger, setup_logging

logger = get_logger("cli.utils")


def tree_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds a module tree."""
    func = click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
                        help='Config file overriding user/project settings')(func)
    func = click.option('--root', 'root_path', type=click.Path(file_okay=False),
                        help='Root module directory (defaults to the plan file directory)')(func)
    func = click.option('--module-suffix', help='Suffix appended to the root project name')(func)
    func = click.option('--terraform-var', 'terraform_vars', multiple=True, metavar='NAME=VALUE',
                        help='Set a root module variable (repeatable)')(func)
    func = click.option('--terraform-var-file', 'terraform_var_files', multiple=True,
                        type=click.Path(exists=True, dir_okay=False),
                        help='JSON variable file (*.tfvars.json, repeatable)')(func)
    func = click.argument('plan_json', type=click.Path(exists=False))(func)
    return func


def build_from_options(
    plan_json: str,
    terraform_var_files: Tuple[str, ...],
    terraform_vars: Tuple[str, ...],
    module_suffix: Optional[str],
    root_path: Optional[str],
    config_path: Optional[str],
) -> Tuple[Module, dict]:
    """Load config, apply its logging level and build the tree."""
    from .. import build_tree
    
    config = load_config(config_path)
    level = config.get("logging", {}).get("level")
    if level and "MODTREE_LOG_LEVEL" not in os.environ:
        setup_logging(str(level))
    
    root = build_tree(
        plan_json,
        root_path=root_path,
        var_files=terraform_var_files,
        vars=terraform_vars,
        module_suffix=module_suffix,
        config=config,
    )
    return root, config


def format_error(message: str) -> str:
    return f"Error: {message}"
