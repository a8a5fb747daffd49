"""Fatal error conditions raised while auditing a lockfile."""

from typing import Optional


class LockscopeError(Exception):
    """Base class for every failure that should stop the audit."""

    exit_code = 2

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(self.message)


class ConfigError(LockscopeError):
    exit_code = 2


class LockfileNotFoundError(LockscopeError):
    exit_code = 3


class MalformedLockfileError(LockscopeError):
    """The lockfile cannot be turned into a dependency graph."""

    exit_code = 4


class ReportFormatError(LockscopeError):
    exit_code = 5


class UnknownPackageError(LockscopeError):
    """A release was looked up in a graph built from a different lockfile."""

    exit_code = 6


class SerializationError(LockscopeError):
    exit_code = 7


class OutputError(LockscopeError):
    """The output stream rejected a write."""

    exit_code = 8
