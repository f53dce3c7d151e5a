"""PowerShell-backed readers for the host's network state."""

from migrator.backends.adapters import AdapterReader
from migrator.backends.connections import ConnectionReader
from migrator.backends.powershell import ExecGate, PowerShellRunner
from migrator.backends.wifi_profiles import WifiProfileReader

__all__ = [
    "AdapterReader",
    "ConnectionReader",
    "ExecGate",
    "PowerShellRunner",
    "WifiProfileReader",
]
