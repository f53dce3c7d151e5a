"""Merges interfaces, connections and stored credentials into profiles.

Each step takes the previous results and returns new lists; nothing is
modified in place.
"""

from __future__ import annotations

from migrator.exceptions import CorrelationMiss
from migrator.models.constants import InterfaceKind, WifiAuthType
from migrator.models.network_models import (
    ConnectionProfile,
    ConnectionRecord,
    NetworkInterface,
    WlanAssociation,
)
from migrator.utils.logger import Logger


def bind_wireless(
    interfaces: list[NetworkInterface], credentials: list[ConnectionProfile]
) -> list[ConnectionProfile]:
    """Copy every stored credential onto each active wireless interface.

    A profile name may therefore appear once per wireless interface.
    """
    bound: list[ConnectionProfile] = []
    for iface in interfaces:
        if iface.kind != InterfaceKind.WIRELESS:
            continue
        bound.extend(
            profile.model_copy(
                update={"interface_index": iface.index, "is_connected": False}
            )
            for profile in credentials
        )
    return bound


def _find_connected_profile(
    profiles: list[ConnectionProfile],
    interfaces: list[NetworkInterface],
    association: WlanAssociation,
) -> int:
    """Return the position of the profile an association refers to.

    Raises:
        CorrelationMiss: If no wireless interface has the GUID, or no profile
            on it has the SSID.
    """
    iface = next(
        (
            i
            for i in interfaces
            if i.kind == InterfaceKind.WIRELESS and i.device_id == association.guid
        ),
        None,
    )
    if iface is None:
        raise CorrelationMiss(f"Can't find wireless interface {association.guid}")

    for position, profile in enumerate(profiles):
        if (
            profile.interface_index == iface.index
            and profile.wifi_ssid == association.ssid
        ):
            return position
    raise CorrelationMiss(
        f"Can't find profile for SSID {association.ssid} on interface {iface.name}"
    )


def mark_connected(
    profiles: list[ConnectionProfile],
    interfaces: list[NetworkInterface],
    associations: list[WlanAssociation],
) -> list[ConnectionProfile]:
    """Flag the profile each wireless interface is currently connected with."""
    log = Logger.get("correlator")
    result = list(profiles)
    for association in associations:
        try:
            position = _find_connected_profile(result, interfaces, association)
        except CorrelationMiss as e:
            log.debug(f"mark_connected: {e}")
            continue
        result[position] = result[position].model_copy(update={"is_connected": True})
        log.debug(
            f"Matched interface {association.guid} to profile SSID {association.ssid}"
        )
    return result


def synthesize_wired(
    interfaces: list[NetworkInterface], connections: dict[str, ConnectionRecord]
) -> list[ConnectionProfile]:
    """Create a credential-less, connected profile for each wired interface."""
    profiles: list[ConnectionProfile] = []
    for iface in interfaces:
        if iface.kind != InterfaceKind.WIRED:
            continue
        connection = connections.get(iface.index)
        name = connection.name if connection is not None else ""
        profiles.append(
            ConnectionProfile(
                name=name or iface.name,
                wifi_auth_type=WifiAuthType.NONE,
                interface_index=iface.index,
                is_connected=True,
            )
        )
    return profiles


def deduplicate_names(profiles: list[ConnectionProfile]) -> list[ConnectionProfile]:
    """Make profile names unique.

    Profiles are stably sorted by name; repeats of a name get an increasing
    suffix, so ``Home, Home, Home`` becomes ``Home, Home1, Home2``.
    """
    result: list[ConnectionProfile] = []
    used: set[str] = set()
    last_name = None
    seq = 0
    for profile in sorted(profiles, key=lambda p: p.name):
        if profile.name == last_name:
            seq += 1
        else:
            last_name = profile.name
            seq = 0
        name = f"{profile.name}{seq}" if seq else profile.name
        # A stored profile may already be named like a generated one
        while name in used:
            seq += 1
            name = f"{profile.name}{seq}"
        used.add(name)
        if name != profile.name:
            profile = profile.model_copy(update={"name": name})
        result.append(profile)
    return result


def correlate(
    interfaces: list[NetworkInterface],
    connections: dict[str, ConnectionRecord],
    credentials: list[ConnectionProfile],
    associations: list[WlanAssociation],
) -> list[ConnectionProfile]:
    """Produce the final profile list for one analyzer run.

    Args:
        interfaces: Active interfaces.
        connections: Connection per interface index.
        credentials: Unbound Wi-Fi profiles (empty when Wi-Fi is excluded).
        associations: Wireless GUID/SSID pairs.

    Returns:
        Wireless and wired profiles with unique names.
    """
    wireless = bind_wireless(interfaces, credentials)
    wireless = mark_connected(wireless, interfaces, associations)
    wired = synthesize_wired(interfaces, connections)
    return deduplicate_names(wireless + wired)
