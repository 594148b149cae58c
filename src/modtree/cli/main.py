"""Main CLI entry point for modtree."""

import click
from .commands.tree import tree
from .commands.warnings import warnings
from .commands.version import version
from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="modtree", message="%(prog)s version %(version)s")
def cli():
    """modtree - Terraform module tree inspection."""
    pass


cli.add_command(tree)
cli.add_command(warnings)
cli.add_command(version)
