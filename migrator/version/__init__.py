from migrator.version.migrator_version import MIGRATOR_VERSION, Version

__all__ = ["MIGRATOR_VERSION", "Version"]
