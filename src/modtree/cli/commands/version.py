"""Version command - show modtree version."""

import click
from ... import __version__


@click.command()
def version():
    """Show modtree version."""
    click.echo(f"modtree version {__version__}")
