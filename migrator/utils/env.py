"""Environment variable helpers with type coercion and logging.

Usage:
    from migrator.utils.env import get_env

    include_wifi = get_env("MIGRATOR_INCLUDE_WIFI", default=True, as_type=bool)
    timeout = get_env("MIGRATOR_PROBE_TIMEOUT", as_type=float)
"""

from __future__ import annotations

import os
from typing import Any, TypeVar, cast, overload

T = TypeVar("T")


class EnvVarError(Exception):
    """Base exception for environment variable errors."""

    pass


class EnvVarTypeError(EnvVarError):
    """Raised when an environment variable cannot be converted to the expected type."""

    def __init__(self, name: str, value: str, expected_type: type) -> None:
        self.name = name
        self.value = value
        self.expected_type = expected_type
        super().__init__(f"Cannot convert {name}='{value}' to {expected_type.__name__}")


def _coerce_type(name: str, value: str, as_type: type) -> Any:
    """Convert a string value to the specified type.

    Raises:
        EnvVarTypeError: If conversion fails.
    """
    try:
        # "false", "0", "" and friends are False
        if as_type is bool:
            return value.lower() not in ("false", "0", "", "no", "off")

        if as_type is int:
            return int(value)
        if as_type is float:
            return float(value)
        if as_type is str:
            return value

        origin = getattr(as_type, "__origin__", None)
        if as_type is list or origin is list:
            return [item.strip() for item in value.split(",") if item.strip()]

        return as_type(value)

    except (ValueError, TypeError) as e:
        raise EnvVarTypeError(name, value, as_type) from e


def _log_access(name: str, value: str | None, masked: bool = False) -> None:
    """Log environment variable access if logger is configured."""
    from migrator.utils.logger import Logger

    if not Logger.is_configured():
        return

    display_value = "***" if masked and value is not None else value
    Logger.get("env").debug(f"ENV GET {name}={display_value}")


@overload
def get_env(name: str, *, default: T, as_type: type[T], log: bool = ...) -> T:
    ...


@overload
def get_env(name: str, *, default: T, log: bool = ...) -> T:
    ...


@overload
def get_env(name: str, *, as_type: type[T], log: bool = ...) -> T | None:
    ...


@overload
def get_env(name: str, *, log: bool = ...) -> str | None:
    ...


def get_env(
    name: str,
    *,
    default: T | None = None,
    as_type: type[T] | None = None,
    log: bool = False,
    mask_in_log: bool = False,
) -> T | str | None:
    """Get an environment variable with optional type coercion.

    Args:
        name: Environment variable name.
        default: Returned when the variable is not set.
        as_type: Type to convert the value to. Supports bool, int, float, str
            and list (comma-separated).
        log: If True, log the access (uses Logger if configured).
        mask_in_log: If True, mask the value in logs.

    Returns:
        The converted value, or default if not set.

    Raises:
        EnvVarTypeError: If as_type is specified and conversion fails.

    Examples:
        >>> get_env("MIGRATOR_PREFER_IPV6", default=True, as_type=bool)
        True
        >>> get_env("MIGRATOR_PROBE_TIMEOUT", default=10.0, as_type=float)
        10.0
    """
    value = os.environ.get(name)

    if log:
        _log_access(name, value, masked=mask_in_log)

    if value is None:
        return default

    if as_type is not None:
        return cast(T, _coerce_type(name, value, as_type))

    return value


def env_is_set(name: str) -> bool:
    """Check if an environment variable is set (not empty)."""
    value = os.environ.get(name)
    return value is not None and value != ""
