"""Checks shared by the commands that hand over to the migration engine."""

from __future__ import annotations

import click

from migrator.analyzer import NetworkAnalyzer
from migrator.exceptions import MigratorError, NoReachableInterface
from migrator.models.network_models import ConnectionProfile, ConnectionRecord


def announce_wifi_profiles(analyzer: NetworkAnalyzer) -> list[ConnectionProfile]:
    """Print and return the Wi-Fi profiles the engine will carry over."""
    profiles = [p for p in analyzer.get_profiles() if p.wifi_ssid]
    names = ", ".join(p.name for p in profiles) if profiles else "<none>"
    click.echo(f"Found WiFi profiles: {names}")
    return profiles


def require_verified(
    analyzer: NetworkAnalyzer, verified: ConnectionRecord | None
) -> ConnectionRecord:
    """Return the verified connection after announcing its profile.

    Raises:
        NoReachableInterface: If no connection reached the API.
        MigratorError: If the verified connection has no connected profile.
    """
    if verified is None:
        raise NoReachableInterface(analyzer.options.probe_url)

    profile = next(
        (
            p
            for p in analyzer.get_profiles()
            if p.interface_index == verified.interface_index and p.is_connected
        ),
        None,
    )
    if profile is None:
        # Verification only succeeds for interfaces with a connected profile
        raise MigratorError(f"Can't find profile for connection {verified.name}")

    click.echo(
        f"balena API is reachable from {profile.name} ({verified.interface_kind})\n"
    )
    return verified


def validate_analyzer(
    analyzer: NetworkAnalyzer,
) -> tuple[list[ConnectionProfile], ConnectionRecord]:
    """Ensure a connection can reach the API and collect Wi-Fi profiles.

    Returns:
        Wi-Fi profiles for the engine and the verified connection.

    Raises:
        NoReachableInterface: If no connection reached the API.
    """
    profiles = announce_wifi_profiles(analyzer)
    verified = require_verified(analyzer, analyzer.test_connectivity())
    return profiles, verified
