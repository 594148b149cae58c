"""Tree command - show the module tree of a Terraform plan."""

import json as jsonlib
import sys
from pathlib import Path
import click
from ...contracts.tree_output import build_tree_output
from ...presentation.human_formatter import format_tree
from ...utils.errors import ModTreeError
from ...utils.logging import get_logger
from ..utils import tree_options, build_from_options, format_error

logger = get_logger("cli.tree")


@click.command()
@tree_options
@click.option('--json', 'as_json', is_flag=True, help='Output structured JSON instead of a text tree')
@click.option('--output', '-o', type=click.Path(), help='Save output to file')
@click.option('--ascii', 'ascii_mode', is_flag=True, default=None, help='Use ASCII tree connectors')
def tree(plan_json, terraform_var_files, terraform_vars, module_suffix, root_path, config_path,
         as_json, output, ascii_mode):
    """
    Show the module tree of a Terraform plan.
    
    PLAN_JSON is the output of: terraform show -json plan.tfplan > plan.json
    """
    try:
        root, config = build_from_options(
            plan_json, terraform_var_files, terraform_vars, module_suffix, root_path, config_path
        )
        
        if as_json:
            output_text = jsonlib.dumps(build_tree_output(root).model_dump(), indent=2)
        else:
            if not ascii_mode:
                ascii_mode = config.get("output", {}).get("ascii") or None
            output_text = format_tree(root, ascii_mode=ascii_mode)
        
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(output_text)
            click.echo(f"Output saved to: {output_path}", err=True)
        else:
            click.echo(output_text)
    
    except ModTreeError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to build module tree: {e}"), err=True)
        sys.exit(1)
