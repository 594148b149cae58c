"""Warnings command - list non-fatal problems found while building the tree."""

import sys
import click
from ...presentation.human_formatter import collect_warnings, format_warnings
from ...utils.errors import ModTreeError
from ...utils.logging import get_logger
from ..utils import tree_options, build_from_options, format_error

logger = get_logger("cli.warnings")

EXIT_WARNINGS = 2


@click.command()
@tree_options
@click.option('--strict', is_flag=True, help=f'Exit with status {EXIT_WARNINGS} when any warning is found')
def warnings(plan_json, terraform_var_files, terraform_vars, module_suffix, root_path, config_path, strict):
    """List the warnings raised for each module in a Terraform plan."""
    try:
        root, _ = build_from_options(
            plan_json, terraform_var_files, terraform_vars, module_suffix, root_path, config_path
        )
    except ModTreeError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to build module tree: {e}"), err=True)
        sys.exit(1)
    
    click.echo(format_warnings(root))
    if strict and collect_warnings(root):
        sys.exit(EXIT_WARNINGS)
