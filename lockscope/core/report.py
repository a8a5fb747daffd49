"""
Audit report model.

A report is produced by the advisory-matching step and is read-only here.
`Report.to_dict` is the JSON document written in structured output mode,
`Report.from_dict` reads the same document back (plus the newer layout
where warnings are grouped by kind).
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from lockscope.core.model import Dependency, Package
from lockscope.errors import ReportFormatError

RUSTSEC_PLACEHOLDER = "RUSTSEC-0000-0000"

_ID_URLS = [
    (re.compile(r"^RUSTSEC-\d{4}-\d{4}$"), "https://rustsec.org/advisories/{id}.html"),
    (re.compile(r"^CVE-\d{4}-\d+$"), "https://cve.mitre.org/cgi-bin/cvename.cgi?name={id}"),
    (re.compile(r"^GHSA-[0-9a-z]{4}-[0-9a-z]{4}-[0-9a-z]{4}$"), "https://github.com/advisories/{id}"),
    (re.compile(r"^TALOS-\d{4}-\d+$"), "https://www.talosintelligence.com/reports/{id}"),
]


@dataclass(frozen=True)
class AdvisoryId:
    value: str

    def url(self) -> Optional[str]:
        """Canonical URL for well-known identifier schemes, if any."""
        if self.value == RUSTSEC_PLACEHOLDER:
            return None

        for pattern, template in _ID_URLS:
            if pattern.match(self.value):
                return template.format(id=self.value)
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Advisory:
    id: AdvisoryId
    package: str
    title: str
    date: str
    description: str = ""
    url: Optional[str] = None
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VersionRanges:
    # Requirement strings kept verbatim and in input order
    patched: Tuple[str, ...] = ()
    unaffected: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Vulnerability:
    advisory: Advisory
    package: Package
    versions: VersionRanges = field(default_factory=VersionRanges)


@dataclass(frozen=True)
class Warning:
    """Informational advisory; it names a crate but no resolved release."""

    package: str
    message: str
    url: Optional[str] = None
    kind: Optional[str] = None


@dataclass(frozen=True)
class Vulnerabilities:
    found: bool = False
    count: int = 0
    list: Tuple[Vulnerability, ...] = ()


@dataclass(frozen=True)
class Report:
    vulnerabilities: Vulnerabilities = field(default_factory=Vulnerabilities)
    warnings: Tuple[Warning, ...] = ()
    lockfile_dependency_count: Optional[int] = None

    # Document the report was read from; written back unchanged by to_dict
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        if self.source is not None:
            return copy.deepcopy(self.source)

        doc: Dict[str, Any] = {}
        if self.lockfile_dependency_count is not None:
            doc["lockfile"] = {"dependency-count": self.lockfile_dependency_count}

        doc["vulnerabilities"] = {
            "found": self.vulnerabilities.found,
            "count": self.vulnerabilities.count,
            "list": [_vulnerability_to_dict(v) for v in self.vulnerabilities.list],
        }
        doc["warnings"] = [_warning_to_dict(w) for w in self.warnings]
        return doc

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        data = _object(data, "report")

        vulns_data = _object(data.get("vulnerabilities") or {}, "vulnerabilities")
        vuln_list = tuple(
            _vulnerability_from_dict(v)
            for v in _array(vulns_data.get("list") or [], "vulnerabilities.list")
        )

        count = vulns_data.get("count", len(vuln_list))
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ReportFormatError(f"vulnerabilities.count must be a non-negative integer, got {count!r}")

        found = vulns_data.get("found", count > 0)
        if not isinstance(found, bool):
            raise ReportFormatError(f"vulnerabilities.found must be true or false, got {found!r}")

        raw_warnings = data.get("warnings") or []
        warnings: List[Warning] = []
        if isinstance(raw_warnings, dict):
            for kind, entries in raw_warnings.items():
                warnings.extend(_warning_from_dict(w, kind) for w in _array(entries, f"warnings.{kind}"))
        else:
            warnings.extend(_warning_from_dict(w) for w in _array(raw_warnings, "warnings"))

        lockfile_info = _object(data.get("lockfile") or {}, "lockfile")
        dependency_count = lockfile_info.get("dependency-count")
        if dependency_count is not None and (not isinstance(dependency_count, int) or isinstance(dependency_count, bool)):
            raise ReportFormatError(f"lockfile.dependency-count must be an integer, got {dependency_count!r}")

        return cls(
            vulnerabilities=Vulnerabilities(found=found, count=count, list=vuln_list),
            warnings=tuple(warnings),
            lockfile_dependency_count=dependency_count,
            source=copy.deepcopy(data),
        )


def _object(value: Any, context: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ReportFormatError(f"{context} must be a JSON object, got {type(value).__name__}")
    return value


def _array(value: Any, context: str) -> List[Any]:
    if not isinstance(value, list):
        raise ReportFormatError(f"{context} must be a JSON array, got {type(value).__name__}")
    return value


def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ReportFormatError(f"{context} is missing required field '{key}'") from None


def _string(data: Dict[str, Any], key: str, context: str, required: bool = True) -> Optional[str]:
    value = _require(data, key, context) if required else data.get(key)
    if value is not None and not isinstance(value, str):
        raise ReportFormatError(f"{context}.{key} must be a string, got {type(value).__name__}")
    return value


def _strings(data: Dict[str, Any], key: str, context: str) -> Tuple[str, ...]:
    values = _array(data.get(key) or [], f"{context}.{key}")
    if not all(isinstance(v, str) for v in values):
        raise ReportFormatError(f"{context}.{key} must only contain strings")
    return tuple(values)


def _vulnerability_to_dict(vuln: Vulnerability) -> Dict[str, Any]:
    advisory = vuln.advisory
    pkg = vuln.package
    return {
        "advisory": {
            "id": advisory.id.value,
            "package": advisory.package,
            "title": advisory.title,
            "description": advisory.description,
            "date": advisory.date,
            "aliases": list(advisory.aliases),
            "url": advisory.url,
        },
        "versions": {
            "patched": list(vuln.versions.patched),
            "unaffected": list(vuln.versions.unaffected),
        },
        "package": {
            "name": pkg.name,
            "version": pkg.version,
            "source": pkg.source,
            "checksum": pkg.checksum,
            "dependencies": [str(d) for d in pkg.dependencies],
        },
    }


def _vulnerability_from_dict(data: Any) -> Vulnerability:
    data = _object(data, "vulnerability")
    adv = _object(_require(data, "advisory", "vulnerability"), "vulnerability.advisory")
    pkg = _object(_require(data, "package", "vulnerability"), "vulnerability.package")
    versions = _object(data.get("versions") or {}, "vulnerability.versions")

    advisory_id = _string(adv, "id", "advisory")
    context = f"advisory {advisory_id}"
    name = _string(pkg, "name", f"package of {advisory_id}")

    advisory = Advisory(
        id=AdvisoryId(advisory_id),
        package=_string(adv, "package", context, required=False) or name,
        title=_string(adv, "title", context),
        date=_string(adv, "date", context),
        description=_string(adv, "description", context, required=False) or "",
        url=_string(adv, "url", context, required=False),
        aliases=_strings(adv, "aliases", context),
    )

    try:
        dependencies = tuple(
            Dependency.parse(d)
            for d in _array(pkg.get("dependencies") or [], f"dependencies of {name}")
        )
    except ValueError as e:
        raise ReportFormatError(f"invalid dependency entry for {name}: {e}") from e

    package = Package(
        name=name,
        version=_string(pkg, "version", f"package of {advisory_id}"),
        source=_string(pkg, "source", f"package of {advisory_id}", required=False),
        checksum=_string(pkg, "checksum", f"package of {advisory_id}", required=False),
        dependencies=dependencies,
    )

    return Vulnerability(
        advisory=advisory,
        package=package,
        versions=VersionRanges(
            patched=_strings(versions, "patched", f"versions of {advisory_id}"),
            unaffected=_strings(versions, "unaffected", f"versions of {advisory_id}"),
        ),
    )


def _warning_to_dict(warning: Warning) -> Dict[str, Any]:
    doc: Dict[str, Any] = {}
    if warning.kind is not None:
        doc["kind"] = warning.kind
    doc["package"] = warning.package
    doc["message"] = warning.message
    doc["url"] = warning.url
    return doc


def _warning_from_dict(data: Any, kind: Optional[str] = None) -> Warning:
    data = _object(data, "warning")

    package = _require(data, "package", "warning")
    # Newer reports embed the full package object
    if isinstance(package, dict):
        package = _string(package, "name", "warning package")
    elif not isinstance(package, str):
        raise ReportFormatError(f"warning package must be a string or object, got {type(package).__name__}")

    advisory = _object(data.get("advisory") or {}, f"advisory of warning for {package}")

    message = _string(data, "message", f"warning for {package}", required=False)
    if message is None:
        message = _string(advisory, "title", f"advisory of warning for {package}", required=False)
    if message is None:
        raise ReportFormatError(f"warning for {package} is missing required field 'message'")

    url = _string(data, "url", f"warning for {package}", required=False)
    if url is None:
        url = _string(advisory, "url", f"advisory of warning for {package}", required=False)

    return Warning(
        package=package,
        message=message,
        url=url,
        kind=_string(data, "kind", f"warning for {package}", required=False) or kind,
    )
