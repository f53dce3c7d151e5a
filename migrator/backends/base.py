"""Base class for readers that query the host through PowerShell."""

from __future__ import annotations

from migrator.backends.powershell import PowerShellRunner, table_query
from migrator.exceptions import CommandError, DiscoveryError, ParseShapeError
from migrator.utils.table_parser import TableParser


class PowerShellReader:
    """Common plumbing for discovery stages.

    Subclasses describe each query by a name (used in error messages), the
    PowerShell command, and the columns to project. ``_read_table`` runs the
    query and returns one dictionary per data row; command and layout
    failures are re-raised as ``DiscoveryError`` carrying the query name.
    """

    def __init__(self, runner: PowerShellRunner) -> None:
        self.runner = runner

    def _setup_commands(self) -> list[str]:
        """Lines run before every query of this reader."""
        return []

    def _read_text(self, name: str, command: str, setup: bool = True) -> str:
        """Run a raw command and return its stdout."""
        commands = [command]
        if setup:
            commands = self._setup_commands() + commands
        try:
            return self.runner.run(commands)
        except CommandError as e:
            raise DiscoveryError(name, e) from e

    def _read_table(
        self, name: str, command: str, columns: list[str]
    ) -> list[dict[str, str]]:
        """Run ``command`` projected to ``columns`` and parse the table."""
        text = self._read_text(name, table_query(command, columns))
        try:
            return TableParser(columns).parse(text)
        except ParseShapeError as e:
            raise DiscoveryError(name, e) from e
