"""Adapter backend - finds network interfaces that are carrying traffic."""

from __future__ import annotations

from migrator.backends.base import PowerShellReader
from migrator.models.constants import (
    CONNECTED_STATE,
    WIRED_MEDIA_MARKER,
    WIRELESS_MEDIA_MARKER,
    InterfaceKind,
)
from migrator.models.network_models import NetworkInterface
from migrator.utils.logger import Logger

ADAPTER_COLUMNS = [
    "ifIndex",
    "PhysicalMediaType",
    "MediaConnectionState",
    "Name",
    "DeviceID",
]


def normalize_device_id(device_id: str) -> str:
    """Strip the braces around a device GUID and upper-case it."""
    device_id = device_id.strip()
    if len(device_id) >= 2 and device_id[0] == "{" and device_id[-1] == "}":
        device_id = device_id[1:-1]
    return device_id.upper()


def media_kind(media_type: str) -> InterfaceKind | None:
    """Map a PhysicalMediaType value to an interface kind."""
    if WIRELESS_MEDIA_MARKER in media_type:
        return InterfaceKind.WIRELESS
    if WIRED_MEDIA_MARKER in media_type:
        return InterfaceKind.WIRED
    return None


class AdapterReader(PowerShellReader):
    """Reads network adapters and keeps the connected wired/wireless ones.

    Adapters that are present but not connected are never returned; a
    migration cannot use a network that is not currently carrying traffic.
    """

    def read_interfaces(self) -> list[NetworkInterface]:
        """Read active interfaces, in the order PowerShell lists them.

        Example output:

            ifIndex PhysicalMediaType MediaConnectionState Name     DeviceID
            ------- ----------------- -------------------- ----     --------
                 13 802.3                     Disconnected Ethernet {C79407AC-...}
                  9 Native 802.11                Connected Wi-Fi    {99D15E59-...}

        Raises:
            DiscoveryError: If the query fails or its output has the wrong
                shape.
        """
        log = Logger.get("discovery.adapters")
        rows = self._read_table("Get-NetAdapter", "Get-NetAdapter", ADAPTER_COLUMNS)

        interfaces: list[NetworkInterface] = []
        for row in rows:
            index = row["ifIndex"]
            if row["MediaConnectionState"] != CONNECTED_STATE:
                log.debug(f"Not considering unconnected interface index {index}")
                continue

            kind = media_kind(row["PhysicalMediaType"])
            if kind is None:
                log.warning(
                    f"Not considering connection of type {row['PhysicalMediaType']}"
                )
                continue

            interfaces.append(
                NetworkInterface(
                    index=index,
                    kind=kind,
                    name=row["Name"],
                    device_id=normalize_device_id(row["DeviceID"]),
                )
            )
            log.debug(f"Found {kind} interface index {index}")

        return interfaces
