"""Tests for joining interfaces, connections and credentials."""

from migrator.correlator import (
    bind_wireless,
    correlate,
    deduplicate_names,
    mark_connected,
    synthesize_wired,
)
from migrator.models import (
    ConnectionProfile,
    ConnectionRecord,
    NetworkInterface,
    WlanAssociation,
)
from migrator.models.constants import InterfaceKind, WifiAuthType

WLAN_A = NetworkInterface(
    index="9", kind=InterfaceKind.WIRELESS, name="Wi-Fi", device_id="AAAA-0001"
)
WLAN_B = NetworkInterface(
    index="12", kind=InterfaceKind.WIRELESS, name="Wi-Fi 2", device_id="BBBB-0002"
)
ETHERNET = NetworkInterface(index="4", kind=InterfaceKind.WIRED, name="Ethernet")

HOME = ConnectionProfile(
    name="Home",
    wifi_ssid="Home",
    wifi_auth_type=WifiAuthType.WPA2_PSK,
    wifi_key="secret",
)
CAFE = ConnectionProfile(name="Cafe", wifi_ssid="Cafe")


def test_bind_wireless_copies_per_interface():
    """Test every credential is bound to every wireless interface."""
    bound = bind_wireless([WLAN_A, ETHERNET, WLAN_B], [HOME, CAFE])

    assert [(p.interface_index, p.name) for p in bound] == [
        ("9", "Home"),
        ("9", "Cafe"),
        ("12", "Home"),
        ("12", "Cafe"),
    ]
    assert not any(p.is_connected for p in bound)
    # Inputs are left untouched
    assert HOME.interface_index == ""


def test_mark_connected():
    """Test only the associated interface/SSID pair is flagged."""
    bound = bind_wireless([WLAN_A, WLAN_B], [HOME, CAFE])
    marked = mark_connected(
        bound, [WLAN_A, WLAN_B], [WlanAssociation(guid="BBBB-0002", ssid="Cafe")]
    )

    connected = [(p.interface_index, p.name) for p in marked if p.is_connected]
    assert connected == [("12", "Cafe")]


def test_mark_connected_misses(log_output):
    """Test unknown GUIDs and SSIDs are logged and ignored."""
    bound = bind_wireless([WLAN_A], [HOME])
    marked = mark_connected(
        bound,
        [WLAN_A],
        [
            WlanAssociation(guid="FFFF-9999", ssid="Home"),
            WlanAssociation(guid="AAAA-0001", ssid="Elsewhere"),
        ],
    )

    assert not any(p.is_connected for p in marked)
    assert "Can't find wireless interface FFFF-9999" in log_output.getvalue()
    assert "Can't find profile for SSID Elsewhere" in log_output.getvalue()


def test_synthesize_wired():
    """Test wired profiles take the connection name, else the adapter name."""
    connections = {
        "4": ConnectionRecord(
            interface_index="4", interface_kind=InterfaceKind.WIRED, name="Network 3"
        ),
    }
    other = NetworkInterface(index="5", kind=InterfaceKind.WIRED, name="Ethernet 2")

    profiles = synthesize_wired([ETHERNET, WLAN_A, other], connections)

    assert [(p.name, p.interface_index) for p in profiles] == [
        ("Network 3", "4"),
        ("Ethernet 2", "5"),
    ]
    for profile in profiles:
        assert profile.is_connected
        assert profile.wifi_ssid == ""
        assert profile.wifi_auth_type == WifiAuthType.NONE


def test_deduplicate_names():
    """Test repeated names get increasing suffixes."""
    profiles = [
        ConnectionProfile(name="Home", interface_index=str(i)) for i in range(3)
    ]
    profiles.append(ConnectionProfile(name="Cafe"))

    names = [p.name for p in deduplicate_names(profiles)]

    assert names == ["Cafe", "Home", "Home1", "Home2"]


def test_deduplicate_names_keeps_order_within_name():
    """Test the sort is stable so the first profile keeps its name."""
    profiles = [
        ConnectionProfile(name="Home", interface_index="9"),
        ConnectionProfile(name="Home", interface_index="12"),
    ]

    result = deduplicate_names(profiles)

    assert [(p.name, p.interface_index) for p in result] == [
        ("Home", "9"),
        ("Home1", "12"),
    ]


def test_deduplicate_names_avoids_existing_suffix():
    """Test a generated name never collides with a stored one."""
    profiles = [
        ConnectionProfile(name="Home"),
        ConnectionProfile(name="Home"),
        ConnectionProfile(name="Home1"),
    ]

    names = [p.name for p in deduplicate_names(profiles)]

    assert sorted(names) == ["Home", "Home1", "Home11"]
    assert len(set(names)) == 3


def test_correlate_dual_wireless_and_wired():
    """Test a host with two wireless adapters and a wired connection."""
    connections = {
        "9": ConnectionRecord(
            interface_index="9", interface_kind=InterfaceKind.WIRELESS, name="Home"
        ),
        "12": ConnectionRecord(
            interface_index="12", interface_kind=InterfaceKind.WIRELESS
        ),
        "4": ConnectionRecord(
            interface_index="4", interface_kind=InterfaceKind.WIRED, name="Home"
        ),
    }

    profiles = correlate(
        [WLAN_A, WLAN_B, ETHERNET],
        connections,
        [HOME],
        [WlanAssociation(guid="AAAA-0001", ssid="Home")],
    )

    assert [p.name for p in profiles] == ["Home", "Home1", "Home2"]
    by_iface = {p.interface_index: p for p in profiles}
    assert by_iface["9"].is_connected and by_iface["9"].wifi_key == "secret"
    assert not by_iface["12"].is_connected
    assert by_iface["4"].is_connected and by_iface["4"].wifi_ssid == ""


def test_correlate_without_wifi():
    """Test only wired profiles are produced without credentials."""
    profiles = correlate([WLAN_A, ETHERNET], {}, [], [])

    assert [(p.name, p.interface_index) for p in profiles] == [("Ethernet", "4")]
