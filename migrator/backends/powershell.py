"""PowerShell backend - runs discovery queries as a script file.

Queries request a fixed, English-named column projection and a wide output,
so the results can be read with ``TableParser`` regardless of the display
language:

    Get-NetAdapter | Format-Table -Property ifIndex, Name | Out-String -Stream -Width 300
"""

from __future__ import annotations

import platform
import subprocess
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from migrator.exceptions import CommandError
from migrator.utils.logger import Logger

# Must specify output width to ensure PowerShell does not truncate lines
FORMAT_TABLE = "| Format-Table"
OUTPUT_WIDTH = "| Out-String -Stream -Width 300"
SCRIPT_NAME = "query.ps1"
# Windows PowerShell writes the OEM code page unless told otherwise
OUTPUT_ENCODING = "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8"


def table_query(command: str, columns: list[str]) -> str:
    """Build a query that prints ``columns`` of ``command`` as a wide table."""
    return f"{command} {FORMAT_TABLE} -Property {', '.join(columns)} {OUTPUT_WIDTH}"


class ExecGate:
    """Capacity-1 mutual exclusion that admits waiters in arrival order.

    The PowerShell host environment is not safe for concurrent invocations
    from the same parent process, so every runner sharing a gate waits its
    turn.

    Example:
        >>> gate = ExecGate()
        >>> with gate:
        ...     subprocess.run(...)
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._next_ticket = 0
        self._serving = 0
        self._abandoned: set[int] = set()

    def acquire(self) -> None:
        """Block until it is this caller's turn."""
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            try:
                while ticket != self._serving:
                    self._cond.wait()
            except BaseException:
                # An interrupted waiter gives up its ticket
                if ticket == self._serving:
                    self._advance()
                else:
                    self._abandoned.add(ticket)
                raise

    def release(self) -> None:
        """Admit the next waiter."""
        with self._cond:
            self._advance()

    def _advance(self) -> None:
        self._serving += 1
        while self._serving in self._abandoned:
            self._abandoned.remove(self._serving)
            self._serving += 1
        self._cond.notify_all()

    @property
    def waiting(self) -> int:
        """Callers holding or waiting for the gate."""
        with self._cond:
            return self._next_ticket - self._serving - len(self._abandoned)

    def __enter__(self) -> ExecGate:
        self.acquire()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.release()


# Shared by all runners in the process unless one is injected
_default_gate = ExecGate()


class PowerShellRunner:
    """Runs lists of PowerShell commands and returns their stdout.

    On hosts other than Windows the runner does nothing and returns empty
    output, so the analyzer degrades to finding no interfaces.
    """

    def __init__(
        self,
        gate: ExecGate | None = None,
        executable: str = "powershell",
        timeout: float | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            gate: Exclusive gate around process execution; defaults to the
                process-wide gate.
            executable: PowerShell executable name or path.
            timeout: Upper bound in seconds for one invocation.
        """
        self.gate = gate if gate is not None else _default_gate
        self.executable = executable
        self.timeout = timeout
        self._log = Logger.get("powershell")

    @staticmethod
    def is_supported() -> bool:
        """True on the only OS the queries target."""
        return platform.system() == "Windows"

    def run(self, commands: list[str]) -> str:
        """Run ``commands`` as one script.

        Args:
            commands: PowerShell lines, executed in order.

        Returns:
            Captured stdout; empty on unsupported hosts.

        Raises:
            CommandError: If PowerShell cannot be launched, exits non-zero,
                or exceeds the timeout.
        """
        if not self.is_supported():
            return ""

        self._log.debug(f"Powershell: {commands[-1] if commands else 'none'}")
        with self._script(commands) as script:
            with self.gate:
                result = self._execute(script)

        self._log.debug(f"stdout: {result.stdout}")
        self._log.debug(f"stderr: {result.stderr}")
        return result.stdout or ""

    @contextmanager
    def _script(self, commands: list[str]) -> Iterator[Path]:
        """Write commands to a script file that is removed on exit."""
        with tempfile.TemporaryDirectory(prefix="migrator-") as tmp_dir:
            script = Path(tmp_dir) / SCRIPT_NAME
            # PowerShell 5.1 reads a script without a BOM as ANSI
            script.write_text(
                "\r\n".join([OUTPUT_ENCODING, *commands]), encoding="utf-8-sig"
            )
            yield script

    def _execute(self, script: Path) -> subprocess.CompletedProcess[str]:
        args = [
            self.executable,
            "-NonInteractive",
            "-ExecutionPolicy",
            "RemoteSigned",
            "-File",
            str(script),
        ]
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise CommandError(
                self.executable, f"exited with status {e.returncode}", e.stderr or ""
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                self.executable, f"timed out after {self.timeout} seconds"
            ) from e
        except OSError as e:
            raise CommandError(self.executable, f"could not be launched: {e}") from e
