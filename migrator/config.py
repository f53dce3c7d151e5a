"""Analyzer configuration from defaults, environment, YAML file and flags.

Later layers win:

    defaults < MIGRATOR_* environment < --config file < CLI flags

Config format:
    include_wifi: true
    module_path: C:\\migrator\\modules
    prefer_ipv6: false
    probe_url: https://api.balena-cloud.com/ping
    probe_timeout: 5
    command_timeout: 30
    engine: C:\\migrator\\engine.exe
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from migrator.models.network_models import AnalyzerOptions
from migrator.utils.env import EnvVarError, env_is_set, get_env

# Option name -> (environment variable, type)
ENV_OPTIONS: dict[str, tuple[str, type]] = {
    "include_wifi": ("MIGRATOR_INCLUDE_WIFI", bool),
    "module_path": ("MIGRATOR_MODULE_PATH", str),
    "prefer_ipv6": ("MIGRATOR_PREFER_IPV6", bool),
    "probe_url": ("MIGRATOR_PROBE_URL", str),
    "probe_timeout": ("MIGRATOR_PROBE_TIMEOUT", float),
    "command_timeout": ("MIGRATOR_COMMAND_TIMEOUT", float),
    "engine": ("MIGRATOR_ENGINE", str),
}


def default_module_path() -> str:
    """Directory beside the working directory holding bundled modules."""
    return str(Path.cwd() / "modules")


def load_config(config_path: str) -> dict[str, Any]:
    """Load analyzer settings from a YAML file.

    Args:
        config_path: Path to YAML config file.

    Returns:
        Parsed config dictionary.

    Raises:
        click.ClickException: If file not found or invalid YAML.
    """
    path = Path(config_path)
    if not path.exists():
        raise click.ClickException(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise click.ClickException(f"Error parsing config: {e}") from e

    # An empty file is an empty config
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise click.ClickException("Config must be a YAML dictionary")

    unknown = sorted(set(config) - set(AnalyzerOptions.model_fields))
    if unknown:
        raise click.ClickException(f"Unknown config keys: {', '.join(unknown)}")

    return config


def env_overrides() -> dict[str, Any]:
    """Read the options set through MIGRATOR_* environment variables.

    Raises:
        click.ClickException: If a variable cannot be converted.
    """
    values: dict[str, Any] = {}
    for option, (name, as_type) in ENV_OPTIONS.items():
        if not env_is_set(name):
            continue
        try:
            values[option] = get_env(name, as_type=as_type, log=True)
        except EnvVarError as e:
            raise click.ClickException(str(e)) from e
    return values


def build_options(config_file: str | None = None, **overrides: Any) -> AnalyzerOptions:
    """Merge every configuration layer into validated analyzer options.

    Args:
        config_file: Optional YAML config path.
        **overrides: Values from CLI flags; None means "not given".

    Raises:
        click.ClickException: If a layer holds an invalid value.
    """
    merged: dict[str, Any] = {"module_path": default_module_path()}
    merged.update(env_overrides())
    if config_file:
        merged.update(load_config(config_file))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalyzerOptions.model_validate(merged)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
