"""Migrator utilities - logging, environment and text table helpers."""

from migrator.utils.env import (
    EnvVarError,
    EnvVarTypeError,
    env_is_set,
    get_env,
)
from migrator.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)
from migrator.utils.table_parser import Column, TableParser, read_columns

__all__ = [
    "Column",
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "LogLevel",
    # Logger
    "Logger",
    "LoggerNotConfiguredError",
    # Tables
    "TableParser",
    "env_is_set",
    "get_env",
    "read_columns",
]
