"""Shared fixtures: a configured logger and a scripted PowerShell runner."""

from io import StringIO

import pytest

from migrator.backends.adapters import ADAPTER_COLUMNS
from migrator.backends.connections import CONNECTION_COLUMNS
from migrator.backends.wifi_profiles import (
    AVAILABLE_NETWORK_COLUMNS,
    PROFILE_COLUMNS,
)
from migrator.connectivity import ADDRESS_COLUMNS
from migrator.exceptions import CommandError
from migrator.utils.logger import Logger


def format_table(columns, rows):
    """Render rows the way ``Format-Table | Out-String`` prints them."""
    widths = [
        max([len(title)] + [len(str(row[i])) for row in rows])
        for i, title in enumerate(columns)
    ]
    header = " ".join(t.ljust(w) for t, w in zip(columns, widths))
    separator = " ".join(("-" * len(t)).ljust(w) for t, w in zip(columns, widths))
    lines = ["", header.rstrip(), separator.rstrip()]
    for row in rows:
        lines.append(" ".join(str(v).ljust(w) for v, w in zip(row, widths)).rstrip())
    lines.extend(["", ""])
    return "\r\n".join(lines)


class FakeRunner:
    """Stands in for PowerShellRunner.

    ``responses`` maps a substring of the last command to its stdout, or to
    an exception to raise. Unmatched commands produce empty output.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def run(self, commands):
        self.calls.append(list(commands))
        for needle, response in self.responses.items():
            if needle in commands[-1]:
                if isinstance(response, Exception):
                    raise response
                return response
        return ""

    def commands_matching(self, needle):
        return [c for c in self.calls if needle in c[-1]]


@pytest.fixture(autouse=True)
def log_output():
    """Route migrator logs to a buffer the test can inspect."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output)
    yield output


@pytest.fixture
def table():
    return format_table


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture
def command_error():
    return CommandError("powershell", "exited with status 1", "Access denied")


WIFI_GUID = "99D15E59-1FF4-4308-AF12-4204EF73B20D"
RSNA_PSK = "DOT11_AUTH_ALGO_RSNA_PSK"
CCMP = "DOT11_CIPHER_ALGO_CCMP"
WIFI_DEVICE_ID = "{" + WIFI_GUID.lower() + "}"

NETSH_CONNECTED = """
There is 1 interface on the system:

    Name                   : Wi-Fi
    Description            : Intel(R) Wi-Fi 6 AX201 160MHz
    GUID                   : 99d15e59-1ff4-4308-af12-4204ef73b20d
    Physical address       : 8c:c6:81:aa:bb:cc
    State                  : connected
    SSID                   : gal47lows
    BSSID                  : c0:4a:00:9a:71:9d
    Network type           : Infrastructure
    Radio type             : 802.11ac

    Hosted network status  : Not available
"""


@pytest.fixture
def home_host(table):
    """Command output for a host with Wi-Fi connected and Ethernet unplugged."""
    return {
        "Get-NetAdapter": table(
            ADAPTER_COLUMNS,
            [
                ["13", "802.3", "Disconnected", "Ethernet", "{C79407AC-1A2B-4C5D}"],
                ["9", "Native 802.11", "Connected", "Wi-Fi", WIFI_DEVICE_ID],
            ],
        ),
        "Get-NetConnectionProfile": table(
            CONNECTION_COLUMNS, [["9", "gal47lows", "Internet", "NoTraffic"]]
        ),
        "Get-WiFiProfile": table(
            PROFILE_COLUMNS,
            [
                ["gal47lows", "auto", "WPA2PSK", "AES", "hunter22"],
                ["CoffeeShop", "manual", "open", "none", ""],
                ["Corp", "auto", "WPA2", "AES", ""],
            ],
        ),
        "Get-WiFiAvailableNetwork": table(
            AVAILABLE_NETWORK_COLUMNS,
            [
                ["gal47lows", "83", "True", RSNA_PSK, CCMP, "gal47lows"],
                ["", "83", "True", RSNA_PSK, CCMP, "gal47lows"],
            ],
        ),
        "netsh wlan show interfaces": NETSH_CONNECTED,
        "Get-NetIPAddress": table(
            ADDRESS_COLUMNS, [["192.168.1.217", "Preferred", "Dhcp", "Dhcp"]]
        ),
    }
