"""Connectivity verification - proves an interface can reach the remote API.

For each connection with IPv4 or IPv6 connectivity, in discovery order:
resolve a usable local address, then send one request to the API bound to
that address. The first connection whose request succeeds is the verified
connection.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable

import httpx

from migrator.backends.base import PowerShellReader
from migrator.backends.powershell import PowerShellRunner
from migrator.exceptions import CorrelationMiss, ManualAddressPolicyViolation
from migrator.models.constants import (
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_PROBE_URL,
    INVALID_ADDRESS_STATES,
    INVALID_IPV6_NETWORKS,
    INVALID_PREFIX_ORIGINS,
    MANUAL_ORIGIN,
    PROBE_SUCCESS_STATUS,
    AddressFamily,
)
from migrator.models.network_models import ConnectionProfile, ConnectionRecord
from migrator.utils.logger import Logger

ADDRESS_COLUMNS = ["IPAddress", "AddressState", "PrefixOrigin", "SuffixOrigin"]

_INVALID_IPV6 = [ipaddress.ip_network(net) for net in INVALID_IPV6_NETWORKS]


def is_ipv4(address: str) -> bool:
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


def is_routable_ipv6(address: str) -> bool:
    """False for unparsable, link-local and unique-local IPv6 addresses."""
    try:
        addr = ipaddress.IPv6Address(address.split("%", 1)[0])
    except ValueError:
        return False
    return not any(addr in net for net in _INVALID_IPV6)


class AddressResolver(PowerShellReader):
    """Reads the local address a connection would send the probe from."""

    def __init__(self, runner: PowerShellRunner, prefer_ipv6: bool = True) -> None:
        """Initialize the resolver.

        Args:
            runner: PowerShell runner.
            prefer_ipv6: Query IPv6 first when both families are usable.
        """
        super().__init__(runner)
        self.prefer_ipv6 = prefer_ipv6

    def family_for(self, record: ConnectionRecord) -> AddressFamily:
        """Choose the address family to query for a connection."""
        if record.has_ipv6 and (self.prefer_ipv6 or not record.has_ipv4):
            return AddressFamily.IPV6
        return AddressFamily.IPV4

    def resolve(self, record: ConnectionRecord) -> ConnectionRecord | None:
        """Return a copy of ``record`` with its address filled in.

        Example output:

            IPAddress     AddressState PrefixOrigin SuffixOrigin
            ---------     ------------ ------------ ------------
            192.168.1.217    Preferred         Dhcp         Dhcp

        The first automatically assigned address wins. If only manually
        assigned addresses are usable, the copy carries the last one with
        ``is_manual_address`` set.

        Returns:
            Updated record, or None if no address is usable.

        Raises:
            DiscoveryError: If the query fails or its output has the wrong
                shape.
        """
        log = Logger.get("connectivity")
        family = self.family_for(record)
        rows = self._read_table(
            "Get-NetIPAddress",
            f"Get-NetIPAddress -InterfaceIndex {record.interface_index} "
            f"-AddressFamily {family}",
            ADDRESS_COLUMNS,
        )

        manual: str | None = None
        for row in rows:
            address = row["IPAddress"]
            if row["AddressState"] in INVALID_ADDRESS_STATES:
                log.debug(f"IP address state {row['AddressState']} not usable")
                continue
            prefix_origin = row["PrefixOrigin"]
            if prefix_origin in INVALID_PREFIX_ORIGINS:
                log.debug(f"IP address prefix {prefix_origin} not usable")
                continue
            if family == AddressFamily.IPV6 and not is_routable_ipv6(address):
                log.debug(f"IPv6 address {address} not routable")
                continue
            if family == AddressFamily.IPV4 and not is_ipv4(address):
                log.debug(f"IPv4 address {address} not valid")
                continue

            if MANUAL_ORIGIN in (prefix_origin, row["SuffixOrigin"]):
                log.debug(f"IP address {address} assigned manually")
                manual = address
                continue

            return record.model_copy(
                update={"ip_address": address, "is_manual_address": False}
            )

        if manual is not None:
            return record.model_copy(
                update={"ip_address": manual, "is_manual_address": True}
            )
        return None


class ApiProbe:
    """Sends one request to the remote API from a given local address."""

    def __init__(
        self,
        url: str = DEFAULT_PROBE_URL,
        timeout: float | None = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout

    def _client(self, local_address: str) -> httpx.Client:
        transport = httpx.HTTPTransport(local_address=local_address)
        return httpx.Client(transport=transport, timeout=self.timeout)

    def __call__(self, record: ConnectionRecord) -> bool:
        """Return True if the API answered with the expected status."""
        log = Logger.get("connectivity")
        log.debug(f"Sending request from address {record.ip_address}")
        try:
            with self._client(record.ip_address) as client:
                response = client.get(self.url)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            log.warning(
                f"API not reachable from {record.name} "
                f"({record.interface_kind}): {e}"
            )
            return False

        log.debug(f"Response code: {response.status_code}")
        return response.status_code == PROBE_SUCCESS_STATUS


def check_policy(
    record: ConnectionRecord, profiles: list[ConnectionProfile]
) -> ConnectionProfile:
    """Return the connected profile for a resolved connection.

    Raises:
        ManualAddressPolicyViolation: If the address was assigned manually.
        CorrelationMiss: If no connected profile is bound to the interface.
    """
    if record.is_manual_address:
        raise ManualAddressPolicyViolation(record.ip_address)
    for profile in profiles:
        if profile.interface_index == record.interface_index and profile.is_connected:
            return profile
    # Correlation creates a profile for every connected interface
    raise CorrelationMiss(
        f"Can't find connected profile for interface {record.interface_index}"
    )


class ConnectivityVerifier:
    """Picks the first connection that can reach the API.

    Connections without IPv4 or IPv6 connectivity are never resolved or
    probed. Skipped connections are not errors: the next one is tried.
    """

    def __init__(
        self,
        resolver: AddressResolver,
        probe: Callable[[ConnectionRecord], bool],
    ) -> None:
        self.resolver = resolver
        self.probe = probe
        self.rejections: list[str] = []

    def verify(
        self,
        connections: list[ConnectionRecord],
        profiles: list[ConnectionProfile],
    ) -> ConnectionRecord | None:
        """Return the verified connection with its address, or None.

        Raises:
            DiscoveryError: If an address query fails.
        """
        log = Logger.get("connectivity")
        for connection in connections:
            if not connection.is_reachable:
                continue

            resolved = self.resolver.resolve(connection)
            if resolved is None:
                log.debug(
                    f"No usable address on interface {connection.interface_index}"
                )
                continue

            try:
                check_policy(resolved, profiles)
            except ManualAddressPolicyViolation as e:
                log.warning(str(e))
                self.rejections.append(str(e))
                continue
            except CorrelationMiss as e:
                log.debug(f"verify: {e}")
                continue

            if self.probe(resolved):
                return resolved

        return None
