import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from lockscope.core.model import Dependency, Lockfile, Package, PackageRelease
from lockscope.errors import MalformedLockfileError, UnknownPackageError


class DependencyGraph:
    """
    Read-only graph over the releases of a lockfile.
    An edge A -> B means "A depends on B". Node ids are integers
    assigned in sorted release order.
    """

    def __init__(self, lockfile: Lockfile) -> None:
        packages = sorted(lockfile.packages, key=Package.release)

        nodes: Dict[PackageRelease, int] = {}
        by_name: Dict[str, List[Package]] = {}
        for pkg in packages:
            release = pkg.release()
            if release in nodes:
                raise MalformedLockfileError(f"duplicate package entry: {release}")
            nodes[release] = len(nodes)
            by_name.setdefault(pkg.name, []).append(pkg)

        dependencies: List[List[int]] = [[] for _ in packages]
        dependents: List[List[int]] = [[] for _ in packages]

        for pkg in packages:
            source_id = nodes[pkg.release()]
            for dep in pkg.dependencies:
                target_id = nodes[self._resolve(pkg, dep, by_name)]
                if target_id not in dependencies[source_id]:
                    dependencies[source_id].append(target_id)
                    dependents[target_id].append(source_id)

        # Ids follow release order, so sorting ids sorts by (name, version)
        self._releases: Tuple[PackageRelease, ...] = tuple(nodes)
        self._nodes: Mapping[PackageRelease, int] = MappingProxyType(nodes)
        self._dependencies = tuple(tuple(sorted(ids)) for ids in dependencies)
        self._dependents = tuple(tuple(sorted(ids)) for ids in dependents)

        logging.debug(f"Dependency graph built. {len(nodes)} nodes.")

    @staticmethod
    def _resolve(pkg: Package, dep: Dependency, by_name: Dict[str, List[Package]]) -> PackageRelease:
        candidates = by_name.get(dep.name, [])
        if dep.version is not None:
            candidates = [c for c in candidates if c.version == dep.version]

        if not candidates:
            raise MalformedLockfileError(
                f"{pkg.name} {pkg.version} depends on {dep}, which is not in the lockfile"
            )
        if len(candidates) > 1:
            raise MalformedLockfileError(
                f"{pkg.name} {pkg.version} depends on {dep}, which matches several versions"
            )
        return candidates[0].release()

    @property
    def nodes(self) -> Mapping[PackageRelease, int]:
        return self._nodes

    def node(self, release: PackageRelease) -> int:
        try:
            return self._nodes[release]
        except KeyError:
            raise UnknownPackageError(
                f"{release} is not part of the dependency graph"
            ) from None

    def release(self, node_id: int) -> PackageRelease:
        return self._releases[node_id]

    def dependencies(self, node_id: int) -> Tuple[int, ...]:
        return self._dependencies[node_id]

    def dependents(self, node_id: int) -> Tuple[int, ...]:
        return self._dependents[node_id]

    def __len__(self) -> int:
        return len(self._releases)
