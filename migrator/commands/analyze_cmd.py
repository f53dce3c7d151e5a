"""Analyze command - checks this device can be migrated, without migrating.

Usage:
    migrator analyze -i balena-flasher.img
    migrator analyze -i balena-flasher.img --no-wifi
    migrator analyze -i balena-flasher.img -o analysis.json
    migrator analyze -i balena-flasher.img --config migrator.yaml
"""

import sys
from pathlib import Path

import click

from migrator.analyzer import NetworkAnalyzer
from migrator.commands.validate import announce_wifi_profiles, require_verified
from migrator.config import build_options
from migrator.engine import MigrateOptions, MigrateResult, get_engine, tasks_after
from migrator.models.report_models import OutputFormat


def get_output_format(output: str | None, fmt: str | None) -> OutputFormat:
    """Determine output format from filename or explicit format."""
    if fmt:
        return OutputFormat(fmt.lower())

    if output:
        suffix = Path(output).suffix.lower()
        if suffix == ".json":
            return OutputFormat.JSON
        elif suffix in (".yaml", ".yml"):
            return OutputFormat.YAML

    return OutputFormat.TEXT


def run_analyze(
    image: str,
    no_wifi: bool,
    config: str | None,
    fmt: str | None,
    output: str | None,
) -> None:
    """Analyze the network and let the engine run its analysis task only."""
    options = build_options(config, include_wifi=False if no_wifi else None)
    engine = get_engine(options.engine)

    analyzer = NetworkAnalyzer(options)
    analyzer.run()

    profiles = announce_wifi_profiles(analyzer)
    verified = analyzer.test_connectivity()
    analyzer.report(verified).emit(
        output if output else sys.stdout, get_output_format(output, fmt)
    )
    require_verified(analyzer, verified)

    result = engine.migrate(
        image,
        MigrateOptions(
            omit_tasks=tasks_after("analyze"), connection_profiles=profiles
        ),
    )
    if result != MigrateResult.OK:
        click.echo(f"Analysis result: {result}")
        sys.exit(1)
