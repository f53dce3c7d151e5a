"""Run command - migrates this device to balenaOS.

Usage:
    migrator run -i balena-flasher.img
    migrator run -i balena-flasher.img -y
"""

import sys

import click

from migrator.analyzer import NetworkAnalyzer
from migrator.commands.validate import validate_analyzer
from migrator.config import build_options
from migrator.engine import (
    MigrateOptions,
    MigrateResult,
    get_engine,
    parse_task_list,
    tasks_after,
)

WARNING = (
    "Warning! This tool will overwrite the operating system and all data "
    "on this computer."
)


def omitted_tasks(last_task: str | None, skip_tasks: str | None) -> list[str]:
    """Convert --last-task or --skip-tasks into the tasks the engine omits.

    Raises:
        ValueError: If the last task is unknown.
    """
    if last_task:
        return tasks_after(last_task)
    return parse_task_list(skip_tasks or "")


def run_migration(
    image: str,
    non_interactive: bool,
    no_wifi: bool,
    config: str | None,
    last_task: str | None,
    skip_tasks: str | None,
) -> None:
    """Confirm, analyze the network, then hand over to the engine."""
    try:
        omit = omitted_tasks(last_task, skip_tasks)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--last-task'") from e

    if not non_interactive:
        click.echo(WARNING)
        if not click.confirm("Continue with migration?", default=False):
            return

    options = build_options(config, include_wifi=False if no_wifi else None)
    engine = get_engine(options.engine)

    analyzer = NetworkAnalyzer(options)
    analyzer.run()
    profiles, _ = validate_analyzer(analyzer)

    result = engine.migrate(
        image, MigrateOptions(omit_tasks=omit, connection_profiles=profiles)
    )
    click.echo(f"Migration result: {result}")
    if result != MigrateResult.OK:
        sys.exit(1)
