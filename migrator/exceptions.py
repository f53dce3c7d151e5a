"""Exception types raised by the network analyzer and migration commands.

Fatal errors (``DiscoveryError``, ``NoReachableInterface``, ``EngineError``)
stop the command. The others describe a single rejected record: they are
raised and caught inside a stage, logged, and the record is skipped.
"""

from __future__ import annotations


class MigratorError(Exception):
    """Base exception for migrator errors."""

    pass


class ParseShapeError(MigratorError):
    """Command output did not have the expected table layout."""

    pass


class ColumnCountMismatch(ParseShapeError):
    """Separator line has fewer column boundaries than requested columns."""

    def __init__(self, expected: int, found: int) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected} columns, only found {found}")


class CommandError(MigratorError):
    """External command could not be launched or exited with an error."""

    def __init__(self, executable: str, reason: str, stderr: str = "") -> None:
        self.executable = executable
        self.reason = reason
        self.stderr = stderr
        message = f"{executable}: {reason}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class DiscoveryError(MigratorError):
    """A discovery or verification stage failed; wraps the originating query."""

    def __init__(self, query: str, cause: Exception) -> None:
        self.query = query
        self.cause = cause
        super().__init__(f"{query}: {cause}")


class UnsupportedCredentialError(MigratorError):
    """Stored Wi-Fi profile cannot be written to the target OS."""

    def __init__(self, profile_name: str, reason: str) -> None:
        self.profile_name = profile_name
        self.reason = reason
        super().__init__(f"WiFi profile {profile_name} {reason}")


class CorrelationMiss(MigratorError):
    """An expected join between two discovery results found no match."""

    pass


class ManualAddressPolicyViolation(MigratorError):
    """Connection uses a statically assigned address."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Ignoring connection with manual address {address}")


class NoReachableInterface(MigratorError):
    """No connected interface could reach the remote API."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"{url} not reachable from any connected interface")


class EngineError(MigratorError):
    """Migration engine is missing or could not be launched."""

    pass


__all__ = [
    "ColumnCountMismatch",
    "CommandError",
    "CorrelationMiss",
    "DiscoveryError",
    "EngineError",
    "ManualAddressPolicyViolation",
    "MigratorError",
    "NoReachableInterface",
    "ParseShapeError",
    "UnsupportedCredentialError",
]
