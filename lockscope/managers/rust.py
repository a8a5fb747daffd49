import os
import sys
import logging
from typing import List
from lockscope.managers.base import LockfileManager
from lockscope.core.model import Dependency, Lockfile, Package
from lockscope.errors import LockfileNotFoundError, MalformedLockfileError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

class RustManager(LockfileManager):
    @property
    def name(self) -> str:
        return "Cargo (Rust)"

    @property
    def lock_files(self) -> list[str]:
        return ["Cargo.lock"]

    def load(self, path: str = "Cargo.lock") -> Lockfile:
        if not os.path.exists(path):
            raise LockfileNotFoundError(f"{path} not found.", source=path)

        logging.debug(f"Parsing {path}...")
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise MalformedLockfileError(f"invalid Cargo.lock file {path}: {e}", source=path) from e
        except OSError as e:
            raise LockfileNotFoundError(f"cannot read {path}: {e}", source=path) from e

        lockfile = self.parse(data, path)
        logging.debug(f"Cargo.lock parsed. {len(lockfile.packages)} packages.")
        return lockfile

    def parse(self, data: dict, path: str = "Cargo.lock") -> Lockfile:
        entries = data.get("package", [])
        if not isinstance(entries, list):
            raise MalformedLockfileError(f"'package' in {path} must be an array of tables", source=path)

        packages: List[Package] = []

        for pkg in entries:
            if not isinstance(pkg, dict):
                raise MalformedLockfileError(f"package entry in {path} is not a table: {pkg!r}", source=path)

            name = pkg.get("name")
            version = pkg.get("version")

            if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
                raise MalformedLockfileError(
                    f"package entry without name or version in {path}: {pkg}", source=path
                )

            for key in ("source", "checksum"):
                if pkg.get(key) is not None and not isinstance(pkg[key], str):
                    raise MalformedLockfileError(f"{key} of {name} {version} in {path} must be a string", source=path)

            raw_dependencies = pkg.get("dependencies", [])
            if not isinstance(raw_dependencies, list):
                raise MalformedLockfileError(
                    f"dependencies of {name} {version} in {path} must be an array", source=path
                )

            try:
                dependencies = tuple(Dependency.parse(d) for d in raw_dependencies)
            except ValueError as e:
                raise MalformedLockfileError(
                    f"invalid dependency of {name} {version} in {path}: {e}", source=path
                ) from e

            packages.append(Package(
                name=name,
                version=version,
                source=pkg.get("source"),
                checksum=pkg.get("checksum"),
                dependencies=dependencies,
            ))

        version = data.get("version")
        if version is not None and (not isinstance(version, int) or isinstance(version, bool)):
            raise MalformedLockfileError(f"lockfile version in {path} must be an integer", source=path)

        return Lockfile(packages=tuple(packages), version=version)
