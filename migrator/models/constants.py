"""Constants for migrator models and commands."""

import sys

if sys.version_info >= (3, 11):  # noqa: UP036
    from enum import StrEnum
else:
    from backports.strenum import StrEnum  # noqa: UP035


class InterfaceKind(StrEnum):
    """Media kind of a network interface."""

    WIRED = "wired"
    WIRELESS = "wireless"


class WifiAuthType(StrEnum):
    """Wi-Fi authentication kinds that can be written to the target OS."""

    NONE = "none"
    WPA2_PSK = "wpa2-psk"
    WPA3_SAE = "wpa3-sae"


class AddressFamily(StrEnum):
    """PowerShell address family names."""

    IPV4 = "IPv4"
    IPV6 = "IPv6"


# Authentication names reported by Get-WiFiProfile
WIFI_AUTH_MAP: dict[str, WifiAuthType] = {
    "open": WifiAuthType.NONE,
    "WPA2PSK": WifiAuthType.WPA2_PSK,
    "WPA3SAE": WifiAuthType.WPA3_SAE,
}
# 'open' means no authentication
KEYLESS_AUTH_MODES = ("open",)

# Values used to qualify acceptable Get-Net* results
CONNECTED_STATE = "Connected"
WIRELESS_MEDIA_MARKER = "802.11"
WIRED_MEDIA_MARKER = "802.3"
INVALID_CONNECTIVITY_MODES = ("Disconnected", "LocalNetwork", "NoTraffic")
INVALID_ADDRESS_STATES = ("Duplicate", "Invalid")
# Includes IPv6 fe80:, which is not routable
INVALID_PREFIX_ORIGINS = ("WellKnown",)
MANUAL_ORIGIN = "Manual"
# Link-local and unique-local IPv6 ranges cannot reach a public endpoint
INVALID_IPV6_NETWORKS = ("fe80::/10", "fc00::/7")

# PowerShell module that reads stored Wi-Fi profiles
WIFI_MODULE_NAME = "WiFiProfileManagement"

# Remote API probe
DEFAULT_PROBE_URL = "https://api.balena-cloud.com/ping"
DEFAULT_PROBE_TIMEOUT = 10.0
PROBE_SUCCESS_STATUS = 200

# Migration target on the host being migrated
WINDOWS_PARTITION = "C"
TARGET_DEVICE = "\\\\.\\PhysicalDrive0"
EFI_LABEL = "M"

# Migration engine tasks, in execution order
MIGRATION_TASKS = ("analyze", "shrink", "copy", "config", "bootloader", "reboot")
