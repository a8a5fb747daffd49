from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version


def _version_key(version: str) -> Tuple:
    try:
        return (0, Version(version), version)
    except InvalidVersion:
        return (1, version, version)


@total_ordering
@dataclass(frozen=True)
class PackageRelease:
    """A resolved (name, version) pair from a lockfile."""

    name: str
    version: str

    def sort_key(self) -> Tuple:
        return (self.name,) + _version_key(self.version)

    def __lt__(self, other: "PackageRelease") -> bool:
        if not isinstance(other, PackageRelease):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class Dependency:
    name: str
    version: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def parse(cls, entry: str) -> "Dependency":
        """
        Parses a Cargo.lock dependency entry.
        Accepted forms: "name", "name version", "name version (source)".
        """
        if not isinstance(entry, str):
            raise ValueError(f"dependency entry must be a string, got {entry!r}")

        parts = entry.strip().split(maxsplit=2)
        if not parts:
            raise ValueError("empty dependency entry")

        name = parts[0]
        version = parts[1] if len(parts) >= 2 else None
        source = None
        if len(parts) == 3:
            source = parts[2].strip().removeprefix("(").removesuffix(")")

        return cls(name, version, source)

    def __str__(self) -> str:
        text = self.name
        if self.version:
            text += f" {self.version}"
        if self.source:
            text += f" ({self.source})"
        return text


@dataclass(frozen=True)
class Package:
    name: str
    version: str
    source: Optional[str] = None
    checksum: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = field(default_factory=tuple)

    def release(self) -> PackageRelease:
        return PackageRelease(self.name, self.version)


@dataclass(frozen=True)
class Lockfile:
    packages: Tuple[Package, ...] = field(default_factory=tuple)

    # Lockfile format revision (None for v1 files which carry no marker)
    version: Optional[int] = None
