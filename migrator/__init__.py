"""Migrator - moves a Windows device to balenaOS with its network settings."""

from migrator.version.migrator_version import MIGRATOR_VERSION, Version

__version__ = str(MIGRATOR_VERSION)
__version_info__ = MIGRATOR_VERSION

__all__ = [
    "MIGRATOR_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
