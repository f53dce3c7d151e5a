"""
Version command - displays migrator version information
"""

import click

from migrator.version import MIGRATOR_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display migrator version information.

    Args:
        verbose: If True, show the package hash and build date
    """
    if not verbose:
        click.echo(f"migrator {MIGRATOR_VERSION}")
        return

    click.echo(f"migrator version {MIGRATOR_VERSION.full_version()}")
    click.echo("\nDetailed version information:")
    click.echo(f"  Semantic Version: {MIGRATOR_VERSION}")
    click.echo(f"  Build Date:       {MIGRATOR_VERSION.date_string()}")
    click.echo(f"  Package Hash:     {MIGRATOR_VERSION.hash}")
