"""Wi-Fi backend - reads stored Wi-Fi profiles and their passphrases.

Wraps the WiFiProfileManagement PowerShell module
(https://github.com/jcwalker/WiFiProfileManagement), plus the legacy
``netsh`` command, which is the only tool that links a wireless adapter to
the profile it is connected with.
"""

from __future__ import annotations

import re

from migrator.backends.base import PowerShellReader
from migrator.backends.powershell import PowerShellRunner
from migrator.exceptions import UnsupportedCredentialError
from migrator.models.constants import (
    KEYLESS_AUTH_MODES,
    WIFI_AUTH_MAP,
    WIFI_MODULE_NAME,
)
from migrator.models.network_models import ConnectionProfile, WlanAssociation
from migrator.utils.logger import Logger

PROFILE_COLUMNS = [
    "ProfileName",
    "ConnectionMode",
    "Authentication",
    "Encryption",
    "Password",
]
AVAILABLE_NETWORK_COLUMNS = [
    "ProfileName",
    "SignalQuality",
    "SecurityEnabled",
    "dot11DefaultAuthAlgorithm",
    "dot11DefaultCipherAlgorithm",
    "SSID",
]
WLAN_INTERFACES_COMMAND = "(netsh wlan show interfaces)"

_GUID_LINE = re.compile(r"^\s+GUID\s+:\s([0-9a-fA-F\-]+)")
# SSID characters are arbitrary; take the rest of the line
_SSID_LINE = re.compile(r"^\s+SSID\s+:\s(.+)")
_BLANK_LINE = re.compile(r"^\s*$")


def decode_profile(row: dict[str, str]) -> ConnectionProfile:
    """Convert one Get-WiFiProfile row to an unbound profile.

    Raises:
        UnsupportedCredentialError: If the authentication kind is not
            supported, or a passphrase is required but missing.
    """
    name = row["ProfileName"]
    auth = row["Authentication"]
    auth_type = WIFI_AUTH_MAP.get(auth)
    if auth_type is None:
        raise UnsupportedCredentialError(name, f"with auth {auth} not supported")

    password = row["Password"]
    if not password and auth not in KEYLESS_AUTH_MODES:
        raise UnsupportedCredentialError(name, f"with auth {auth} but no passphrase")

    return ConnectionProfile(name=name, wifi_auth_type=auth_type, wifi_key=password)


def parse_wlan_interfaces(text: str) -> list[WlanAssociation]:
    """Parse ``netsh wlan show interfaces`` output.

    Each interface block is separated by a blank line and has a GUID line
    and, when associated, an SSID line. A GUID without an SSID (adapter not
    connected) produces nothing.

        Name                   : Wi-Fi
        GUID                   : 99d15e59-1ff4-4308-af12-4204ef73b20d
        State                  : connected
        SSID                   : gal47lows
        BSSID                  : c0:4a:00:9a:71:9d
    """
    associations: list[WlanAssociation] = []
    guid = ""
    ssid = ""
    for line in text.splitlines():
        guid_match = _GUID_LINE.match(line)
        if guid_match:
            guid = guid_match.group(1).upper()
        else:
            ssid_match = _SSID_LINE.match(line)
            if ssid_match:
                ssid = ssid_match.group(1).rstrip()

        if guid and ssid:
            associations.append(WlanAssociation(guid=guid, ssid=ssid))
            guid = ""
            ssid = ""
        elif _BLANK_LINE.match(line):
            guid = ""
            ssid = ""

    return associations


class WifiProfileReader(PowerShellReader):
    """Reads stored Wi-Fi profiles, independent of any interface.

    Profiles that cannot be written to the target OS are dropped and their
    reasons kept in ``rejections``.
    """

    def __init__(self, runner: PowerShellRunner, module_path: str = "") -> None:
        """Initialize the reader.

        Args:
            runner: PowerShell runner.
            module_path: Directory holding the WiFiProfileManagement module;
                leave empty if it is on the default module path.
        """
        super().__init__(runner)
        self.module_path = module_path
        self.rejections: list[str] = []

    def _setup_commands(self) -> list[str]:
        if not self.module_path:
            return []
        return [
            f'$Env:PSModulePath = "$Env:PSModulePath;{self.module_path}"',
            f"Import-Module {WIFI_MODULE_NAME}",
        ]

    def collect_profiles(self) -> list[ConnectionProfile]:
        """Read stored profiles with their SSIDs.

        When the network for a profile is not in range, its SSID is assumed
        to match the profile name.

        Raises:
            DiscoveryError: If a query fails or its output has the wrong shape.
        """
        credentials = self.read_credentials()
        ssids = self.read_available_ssids(set(credentials))
        return [
            profile.model_copy(update={"wifi_ssid": ssids.get(name) or name})
            for name, profile in credentials.items()
        ]

    def read_credentials(self) -> dict[str, ConnectionProfile]:
        """Read stored profiles with cleartext passphrases, keyed on name.

        Example output:

            ProfileName ConnectionMode Authentication Encryption Password
            ----------- -------------- -------------- ---------- --------
            gal47lows   auto           WPA2PSK        AES        xxxxx
        """
        log = Logger.get("discovery.wifi")
        rows = self._read_table(
            "Get-WiFiProfile", "Get-WiFiProfile -ClearKey", PROFILE_COLUMNS
        )

        profiles: dict[str, ConnectionProfile] = {}
        for row in rows:
            try:
                profile = decode_profile(row)
            except UnsupportedCredentialError as e:
                log.warning(str(e))
                self.rejections.append(str(e))
                continue
            profiles[profile.name] = profile
        return profiles

    def read_available_ssids(self, names: set[str]) -> dict[str, str]:
        """Read the SSID currently broadcast for each named profile.

        Example output:

            ProfileName SignalQuality SecurityEnabled dot11DefaultAuthAlgorithm ... SSID
            ----------- ------------- --------------- ------------------------- ... ----
            gal47lows   83            True            DOT11_AUTH_ALGO_RSNA_PSK  ... gal47lows
                        83            True            DOT11_AUTH_ALGO_RSNA_PSK  ... gal47lows
        """
        log = Logger.get("discovery.wifi")
        rows = self._read_table(
            "Get-WiFiAvailableNetwork",
            "Get-WiFiAvailableNetwork",
            AVAILABLE_NETWORK_COLUMNS,
        )

        ssids: dict[str, str] = {}
        for row in rows:
            name = row["ProfileName"]
            if name not in names:
                log.debug(f"read_available_ssids: Can't find profile {name}")
                continue
            ssids[name] = row["SSID"]
        return ssids

    def read_wlan_associations(self) -> list[WlanAssociation]:
        """Read which SSID each wireless adapter GUID is connected to."""
        text = self._read_text(
            "netsh wlan show interfaces", WLAN_INTERFACES_COMMAND, setup=False
        )
        return parse_wlan_interfaces(text)
