import hashlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

_SKIP_DIRS = {"__pycache__", ".git", ".pytest_cache"}


@dataclass(frozen=True)
class Version:
    """
    Semantic version information for migrator.

    The package hash identifies the exact sources a build was made from,
    which matters when the tool is copied onto a device by hand.
    """
    major: int
    minor: int
    patch: int
    hash: str
    date: datetime

    def __str__(self) -> str:
        """Return the semantic version string (e.g., '0.2.4')."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def full_version(self) -> str:
        """Return full version info including hash and date."""
        return f"{self} (hash: {self.hash_short()}, date: {self.date_string()})"

    def hash_short(self, length: int = 8) -> str:
        """Return shortened hash (default 8 characters)."""
        return self.hash[:length]

    def date_string(self, fmt: str = "%Y-%m-%d") -> str:
        """Return formatted date string."""
        return self.date.strftime(fmt)


def package_hash(package_dir: Path | None = None) -> str:
    """
    SHA256 over the source files of the package, in path order.
    """
    root = package_dir or Path(__file__).resolve().parent.parent
    hasher = hashlib.sha256()
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if not path.is_file() or _SKIP_DIRS.intersection(relative.parts):
            continue
        if path.suffix in (".pyc", ".pyo", ".pyd"):
            continue
        hasher.update(relative.as_posix().encode())
        hasher.update(path.read_bytes())
    return hasher.hexdigest()


# Current version instance
MIGRATOR_VERSION = Version(
    major=0,
    minor=2,
    patch=4,
    hash=package_hash(),
    date=datetime(2026, 10, 18),
)
