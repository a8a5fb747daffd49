import os
from .rust import RustManager

MANAGERS = [
    RustManager(),
]


def detect_manager(directory: str = "."):
    """Checks files in the given directory and returns the matching manager and lockfile path."""
    files = os.listdir(directory)

    for manager in MANAGERS:
        lock_file = manager.find_lockfile(files)
        if lock_file:
            return manager, os.path.join(directory, lock_file)

    return None, None


def manager_for(path: str):
    """Returns the manager handling a lockfile by its filename."""
    filename = os.path.basename(path)

    for manager in MANAGERS:
        if manager.detect([filename]):
            return manager

    return None
