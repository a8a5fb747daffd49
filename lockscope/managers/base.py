from abc import ABC, abstractmethod
from typing import List
from lockscope.core.model import Lockfile

class LockfileManager(ABC):
    """Base class inherited by all lockfile managers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Friendly ecosystem name (e.g., Cargo)."""
        pass

    @property
    @abstractmethod
    def lock_files(self) -> List[str]:
        """List of exact filenames to check."""
        pass

    def detect(self, files: List[str]) -> bool:
        """
        Returns True if this manager supports one of the given files.
        Default implementation checks for exact match in lock_files.
        """
        return self.find_lockfile(files) is not None

    def find_lockfile(self, files: List[str]):
        for lock_file in self.lock_files:
            if lock_file in files:
                return lock_file
        return None

    @abstractmethod
    def load(self, path: str) -> Lockfile:
        pass
