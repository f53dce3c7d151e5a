"""Network analyzer - finds the connections the migrated device can use.

Usage:
    from migrator.analyzer import NetworkAnalyzer
    from migrator.models import AnalyzerOptions

    analyzer = NetworkAnalyzer(AnalyzerOptions(include_wifi=True))
    analyzer.run()

    profiles = analyzer.get_profiles()
    verified = analyzer.test_connectivity()
    analyzer.report(verified).emit(sys.stdout)
"""

from __future__ import annotations

from collections.abc import Callable

from migrator.backends.adapters import AdapterReader
from migrator.backends.connections import ConnectionReader
from migrator.backends.powershell import PowerShellRunner
from migrator.backends.wifi_profiles import WifiProfileReader
from migrator.connectivity import AddressResolver, ApiProbe, ConnectivityVerifier
from migrator.correlator import correlate
from migrator.models.network_models import (
    AnalyzerOptions,
    ConnectionProfile,
    ConnectionRecord,
    NetworkInterface,
    WlanAssociation,
)
from migrator.models.report_models import AnalysisReport
from migrator.utils.logger import Logger


class NetworkAnalyzer:
    """Discovers interfaces, connections and profiles, then verifies one.

    ``run`` must be called before ``get_profiles`` or ``test_connectivity``.
    Every stage failure surfaces as ``DiscoveryError``; rejected Wi-Fi
    profiles and manually addressed connections are only recorded in
    ``rejections``.
    """

    def __init__(
        self,
        options: AnalyzerOptions | None = None,
        runner: PowerShellRunner | None = None,
        probe: Callable[[ConnectionRecord], bool] | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            options: Analyzer settings; defaults apply when omitted.
            runner: PowerShell runner shared by every stage.
            probe: Callable that checks API reachability for a resolved
                connection; defaults to an ``ApiProbe`` for the options.
        """
        self.options = options if options is not None else AnalyzerOptions()
        self.runner = (
            runner
            if runner is not None
            else PowerShellRunner(timeout=self.options.command_timeout)
        )
        self.probe = (
            probe
            if probe is not None
            else ApiProbe(self.options.probe_url, self.options.probe_timeout)
        )

        self.interfaces: list[NetworkInterface] = []
        self.connections: dict[str, ConnectionRecord] = {}
        self.profiles: list[ConnectionProfile] = []
        self.discovery_rejections: list[str] = []
        self.connectivity_rejections: list[str] = []
        self._has_run = False

    @property
    def rejections(self) -> list[str]:
        """Reasons from the last run and the last connectivity test."""
        return self.discovery_rejections + self.connectivity_rejections

    def run(self) -> None:
        """Discover and correlate the host's network state.

        Results are replaced only when every stage succeeds.

        Raises:
            DiscoveryError: If any discovery query fails.
        """
        log = Logger.get("analyzer")
        self._has_run = False

        interfaces = AdapterReader(self.runner).read_interfaces()
        log.debug(f"Found {len(interfaces)} active interfaces")

        connections = ConnectionReader(self.runner).read_connections(interfaces)

        credentials: list[ConnectionProfile] = []
        associations: list[WlanAssociation] = []
        rejections: list[str] = []
        if self.options.include_wifi:
            reader = WifiProfileReader(self.runner, self.options.module_path)
            credentials = reader.collect_profiles()
            associations = reader.read_wlan_associations()
            rejections = list(reader.rejections)

        profiles = correlate(interfaces, connections, credentials, associations)
        log.debug(f"Correlated {len(profiles)} profiles")

        self.interfaces = interfaces
        self.connections = connections
        self.profiles = profiles
        self.discovery_rejections = rejections
        self.connectivity_rejections = []
        self._has_run = True

    def _require_run(self) -> None:
        if not self._has_run:
            raise RuntimeError("NetworkAnalyzer.run() has not been called")

    def get_profiles(self) -> list[ConnectionProfile]:
        """Return the correlated profiles from the last run."""
        self._require_run()
        return list(self.profiles)

    def test_connectivity(self) -> ConnectionRecord | None:
        """Return the first connection that reaches the API, or None.

        Raises:
            DiscoveryError: If an address query fails.
        """
        self._require_run()
        verifier = ConnectivityVerifier(
            AddressResolver(self.runner, self.options.prefer_ipv6), self.probe
        )
        verified = verifier.verify(list(self.connections.values()), self.profiles)
        self.connectivity_rejections = list(verifier.rejections)
        return verified

    def report(self, verified: ConnectionRecord | None = None) -> AnalysisReport:
        """Snapshot the analyzer state for emission."""
        return AnalysisReport(
            interfaces=self.interfaces,
            connections=list(self.connections.values()),
            profiles=self.profiles,
            verified=verified,
            rejections=self.rejections,
        )
