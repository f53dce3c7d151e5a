"""Connection backend - reads the logical connection on each interface."""

from __future__ import annotations

from migrator.backends.base import PowerShellReader
from migrator.exceptions import CorrelationMiss
from migrator.models.constants import INVALID_CONNECTIVITY_MODES
from migrator.models.network_models import ConnectionRecord, NetworkInterface
from migrator.utils.logger import Logger

CONNECTION_COLUMNS = ["InterfaceIndex", "Name", "IPv4Connectivity", "IPv6Connectivity"]


def is_usable(connectivity: str) -> bool:
    """True unless the connectivity state is known to carry no traffic."""
    return connectivity not in INVALID_CONNECTIVITY_MODES


def _interface_for(
    by_index: dict[str, NetworkInterface], index: str
) -> NetworkInterface:
    iface = by_index.get(index)
    if iface is None:
        raise CorrelationMiss(f"Can't find interface index {index}")
    return iface


class ConnectionReader(PowerShellReader):
    """Reads connection names and IPv4/IPv6 usability for active interfaces."""

    def read_connections(
        self, interfaces: list[NetworkInterface]
    ) -> dict[str, ConnectionRecord]:
        """Build one ConnectionRecord per active interface.

        Example output:

            InterfaceIndex Name      IPv4Connectivity IPv6Connectivity
            -------------- ----      ---------------- ----------------
                         9 gal47lows         Internet        NoTraffic

        Interfaces without a connection row get an inert record with both
        reachability flags false.

        Returns:
            Records keyed on interface index, in interface order.

        Raises:
            DiscoveryError: If the query fails or its output has the wrong
                shape.
        """
        log = Logger.get("discovery.connections")
        rows = self._read_table(
            "Get-NetConnectionProfile", "Get-NetConnectionProfile", CONNECTION_COLUMNS
        )

        by_index = {iface.index: iface for iface in interfaces}
        found: dict[str, ConnectionRecord] = {}
        for row in rows:
            index = row["InterfaceIndex"]
            try:
                iface = _interface_for(by_index, index)
            except CorrelationMiss as e:
                log.debug(f"read_connections: {e}")
                continue

            found[index] = ConnectionRecord(
                interface_index=index,
                interface_kind=iface.kind,
                name=row["Name"],
                has_ipv4=is_usable(row["IPv4Connectivity"]),
                has_ipv6=is_usable(row["IPv6Connectivity"]),
            )

        connections: dict[str, ConnectionRecord] = {}
        for iface in interfaces:
            record = found.get(iface.index)
            if record is None:
                log.debug(f"No connection profile for interface index {iface.index}")
                record = ConnectionRecord(
                    interface_index=iface.index, interface_kind=iface.kind
                )
            connections[iface.index] = record
        return connections
