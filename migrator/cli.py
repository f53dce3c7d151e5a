#!/usr/bin/env python3
"""Migrator CLI - moves a Windows device to balenaOS."""

import sys

import click

from migrator.exceptions import MigratorError
from migrator.utils.env import get_env
from migrator.utils.logger import Logger


def _abort(error: MigratorError) -> None:
    click.echo(f"Can't proceed with migration: {error}", err=True)
    sys.exit(1)


@click.group()
def migrator():
    """Migrate this device from Windows to balenaOS."""
    # Logs go to stderr so report output on stdout stays parseable
    if not Logger.is_configured():
        Logger.configure(
            level=get_env("MIGRATOR_LOG_LEVEL", default="INFO"), output="stderr"
        )


@migrator.command()
@click.option(
    "--image", "-i", required=True, help="balenaOS image path name"
)
@click.option(
    "--no-wifi",
    is_flag=True,
    default=False,
    help="Do not analyze WiFi network configurations",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(),
    default=None,
    help="YAML config file with analyzer settings",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json", "yaml"], case_sensitive=False),
    default=None,
    help="Report format (default: from output extension, else text)",
)
@click.option(
    "--output", "-o", default=None, help="Write the report to this file"
)
def analyze(image, no_wifi, config_file, fmt, output):
    """Analyze migration of this device to balenaOS.

    \b
    Examples:
      migrator analyze -i \\Users\\John\\balena-flasher.img
      migrator analyze -i balena-flasher.img --no-wifi -o analysis.json
    """
    from migrator.commands.analyze_cmd import run_analyze

    try:
        run_analyze(
            image=image,
            no_wifi=no_wifi,
            config=config_file,
            fmt=fmt,
            output=output,
        )
    except MigratorError as e:
        _abort(e)


@migrator.command()
@click.option(
    "--image", "-i", required=True, help="balenaOS image path name"
)
@click.option(
    "--non-interactive",
    "-y",
    is_flag=True,
    default=False,
    help="No user input; use defaults",
)
@click.option(
    "--no-wifi",
    is_flag=True,
    default=False,
    help="Do not migrate WiFi network configurations",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(),
    default=None,
    help="YAML config file with analyzer settings",
)
# Development options; tasks run in order analyze,shrink,copy,config,bootloader,reboot
@click.option(
    "--last-task", default=None, hidden=True, help="Make this task the last to perform"
)
@click.option(
    "--skip-tasks",
    default=None,
    hidden=True,
    help="Comma-separated tasks not to perform",
)
def run(image, non_interactive, no_wifi, config_file, last_task, skip_tasks):
    """Run migration of this device to balenaOS.

    \b
    Examples:
      migrator run -i \\Users\\John\\balena-flasher.img
    """
    from migrator.commands.run_cmd import run_migration

    if last_task and skip_tasks:
        raise click.UsageError("--last-task and --skip-tasks are mutually exclusive")

    try:
        run_migration(
            image=image,
            non_interactive=non_interactive,
            no_wifi=no_wifi,
            config=config_file,
            last_task=last_task,
            skip_tasks=skip_tasks,
        )
    except MigratorError as e:
        _abort(e)


@migrator.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display migrator version information."""
    from migrator.commands.version_cmd import run_version

    if verbose:
        Logger.set_level("DEBUG")

    run_version(verbose=verbose)


if __name__ == "__main__":
    migrator()
