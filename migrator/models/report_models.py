"""Network analysis report and its emission as text, JSON or YAML.

Usage:
    report = analyzer.report(verified)
    report.emit(sys.stdout, OutputFormat.TEXT)
    report.emit("analysis.yaml", OutputFormat.YAML)
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from enum import Enum
from io import StringIO
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel, ConfigDict, Field

from migrator.models.network_models import (
    ConnectionProfile,
    ConnectionRecord,
    NetworkInterface,
)

if sys.version_info >= (3, 11):  # noqa: UP036
    from datetime import UTC
else:
    from datetime import timezone

    UTC = timezone.utc

MASK = "***"


class OutputFormat(Enum):
    """Supported output formats for the analysis report."""

    JSON = "json"
    YAML = "yaml"
    TEXT = "text"


class AnalysisReport(BaseModel):
    """Everything one analyzer run found."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    interfaces: list[NetworkInterface] = Field(default_factory=list)
    connections: list[ConnectionRecord] = Field(default_factory=list)
    profiles: list[ConnectionProfile] = Field(default_factory=list)
    verified: ConnectionRecord | None = None
    rejections: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a serializable dictionary with passphrases masked."""
        data = self.model_dump(mode="json")
        for profile in data["profiles"]:
            if profile["wifi_key"]:
                profile["wifi_key"] = MASK
        return data

    def emit(
        self,
        output: str | Path | TextIO,
        format: OutputFormat = OutputFormat.TEXT,
        indent: int = 2,
    ) -> None:
        """Emit the report to a file path or stream."""
        if format == OutputFormat.JSON:
            content = json.dumps(self.to_dict(), indent=indent)
        elif format == OutputFormat.YAML:
            content = self._to_yaml(indent)
        elif format == OutputFormat.TEXT:
            content = self._to_text()
        else:
            raise ValueError(f"Unknown format: {format}")

        if isinstance(output, str | Path):
            Path(output).write_text(content + "\n")
        else:
            output.write(content + "\n")

    def _to_yaml(self, indent: int) -> str:
        import yaml

        result: str = yaml.safe_dump(
            self.to_dict(), indent=indent, default_flow_style=False, sort_keys=False
        )
        return result.rstrip("\n")

    def _to_text(self) -> str:
        output = StringIO()
        data = self.to_dict()

        output.write("=" * 60 + "\n")
        output.write("  NETWORK ANALYSIS\n")
        output.write("=" * 60 + "\n")
        output.write(f"Time: {data['timestamp']}\n\n")

        output.write("Interfaces:\n")
        if not data["interfaces"]:
            output.write("  <none>\n")
        for iface in data["interfaces"]:
            output.write(
                f"  [{iface['index']:>3}] {iface['name']:<20} {iface['kind']:<9} "
                f"{iface['device_id']}\n"
            )

        output.write("\nConnections:\n")
        if not data["connections"]:
            output.write("  <none>\n")
        for conn in data["connections"]:
            families = [
                family
                for family, usable in (
                    ("IPv4", conn["has_ipv4"]),
                    ("IPv6", conn["has_ipv6"]),
                )
                if usable
            ]
            output.write(
                f"  [{conn['interface_index']:>3}] {conn['name'] or '<unnamed>':<20} "
                f"{', '.join(families) or 'no connectivity'}\n"
            )

        output.write("\nProfiles:\n")
        if not data["profiles"]:
            output.write("  <none>\n")
        for profile in data["profiles"]:
            marker = "*" if profile["is_connected"] else " "
            ssid = profile["wifi_ssid"] or "-"
            output.write(
                f" {marker}[{profile['interface_index']:>3}] {profile['name']:<20} "
                f"ssid={ssid} auth={profile['wifi_auth_type']}\n"
            )

        verified = data["verified"]
        output.write("\nVerified connection: ")
        if verified:
            output.write(
                f"{verified['name'] or verified['interface_index']} "
                f"({verified['interface_kind']}) from {verified['ip_address']}\n"
            )
        else:
            output.write("<none>\n")

        if data["rejections"]:
            output.write("\nRejected:\n")
            for reason in data["rejections"]:
                output.write(f"  {reason}\n")

        output.write("=" * 60)
        return output.getvalue()
