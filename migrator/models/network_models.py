"""Pydantic models for discovered interfaces, connections and profiles."""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from migrator.models.constants import (
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_PROBE_URL,
    InterfaceKind,
    WifiAuthType,
)


class NetworkInterface(BaseModel):
    """A network adapter currently in the Connected state."""

    model_config = ConfigDict(frozen=True)

    index: str = Field(..., description="OS interface index (join key)")
    kind: InterfaceKind = Field(..., description="Wired or wireless")
    name: str = Field("", description="User-facing adapter name, like 'Wi-Fi'")
    device_id: str = Field(
        "", description="Upper-cased device GUID without braces"
    )


class ConnectionRecord(BaseModel):
    """Logical connection bound to an active interface."""

    model_config = ConfigDict(frozen=True)

    interface_index: str = Field(..., description="Index of the bound interface")
    interface_kind: InterfaceKind = Field(..., description="Kind of the interface")
    name: str = Field("", description="Connection name; SSID for Wi-Fi")
    has_ipv4: bool = Field(False, description="IPv4 connectivity is usable")
    has_ipv6: bool = Field(False, description="IPv6 connectivity is usable")
    ip_address: str = Field("", description="Resolved local address")
    is_manual_address: bool = Field(
        False, description="Address was assigned statically"
    )

    @property
    def is_reachable(self) -> bool:
        """True if either address family is usable."""
        return self.has_ipv4 or self.has_ipv6


class ConnectionProfile(BaseModel):
    """Network configuration to be written to the migration target.

    ``wifi_ssid`` and ``wifi_key`` are empty for wired connections.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Profile name, unique in a result set")
    wifi_ssid: str = Field("", description="Wi-Fi SSID")
    wifi_auth_type: WifiAuthType = Field(
        WifiAuthType.NONE, description="Wi-Fi authentication kind"
    )
    wifi_key: str = Field("", description="Wi-Fi passphrase")
    interface_index: str = Field("", description="Index of the bound interface")
    is_connected: bool = Field(
        False, description="Profile is in use on its interface"
    )

    @property
    def is_wifi(self) -> bool:
        """True for Wi-Fi profiles."""
        return bool(self.wifi_ssid)


class WlanAssociation(BaseModel):
    """Wireless adapter GUID and the SSID it is associated with."""

    model_config = ConfigDict(frozen=True)

    guid: str
    ssid: str


class AnalyzerOptions(BaseModel):
    """Settings for a NetworkAnalyzer run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include_wifi: bool = Field(True, description="Discover Wi-Fi profiles")
    module_path: str = Field(
        "", description="Extra PowerShell module path for WiFiProfileManagement"
    )
    prefer_ipv6: bool = Field(
        True, description="Try IPv6 first when both families are usable"
    )
    probe_url: str = Field(
        DEFAULT_PROBE_URL, description="Remote endpoint for the probe"
    )
    probe_timeout: float | None = Field(
        DEFAULT_PROBE_TIMEOUT, description="Seconds per probe request", gt=0
    )
    command_timeout: float | None = Field(
        None, description="Seconds per PowerShell invocation", gt=0
    )
    engine: str | None = Field(
        None, description="External migration engine executable"
    )

    @field_validator("probe_url")
    @classmethod
    def _check_probe_url(cls, value: str) -> str:
        # Kept as given; httpx only accepts absolute http(s) URLs
        try:
            TypeAdapter(HttpUrl).validate_python(value)
        except ValidationError as e:
            raise ValueError(f"not an http(s) URL: {value}") from e
        return value
