"""Presenter for audit reports."""

import json
import logging
from typing import Optional, Set

from rich.console import Console
from rich.text import Text

from lockscope.config import OutputConfig, OutputFormat
from lockscope.core.graph import DependencyGraph
from lockscope.core.model import Lockfile, Package, PackageRelease
from lockscope.core.report import Report, Vulnerability, Warning
from lockscope.errors import OutputError, SerializationError
from lockscope.presenter.style import Emphasis, attr_line, status_line
from lockscope.presenter.tree import Tree


class Presenter:
    """Prints vulnerability reports as JSON or as colorized terminal text."""

    def __init__(self, config: OutputConfig, console: Optional[Console] = None) -> None:
        self.config = config
        self.console = console or Console(highlight=False, soft_wrap=True)

        # Releases whose dependency tree has already been shown
        self.displayed_packages: Set[PackageRelease] = set()

    def before_report(self, lockfile_path: str, lockfile: Lockfile) -> None:
        if self.config.is_quiet():
            return

        self._print(status_line(
            "Scanning",
            f"{lockfile_path} for vulnerabilities ({len(lockfile.packages)} crate dependencies)",
            Emphasis.SUCCESS,
            justified=True,
        ))

    def print_report(self, report: Report, lockfile: Lockfile) -> None:
        if self.config.format == OutputFormat.JSON:
            self._print_json(report)
            return

        self.displayed_packages = set()

        if report.vulnerabilities.found:
            self._print(status_line("error:", "Vulnerable crates found!", Emphasis.ALERT))
        else:
            self._print(status_line("Success", "No vulnerable packages found", Emphasis.SUCCESS, justified=True))

        dependency_graph = DependencyGraph(lockfile)

        for vulnerability in report.vulnerabilities.list:
            self.print_vulnerability(vulnerability, dependency_graph)

        if report.warnings:
            self._print()
            self._print(status_line("warning:", "found informational advisories for dependencies", Emphasis.CAUTION))

            for warning in report.warnings:
                self.print_warning(warning)

        if report.vulnerabilities.found:
            self._print()

            count = report.vulnerabilities.count
            if count == 1:
                message = "1 vulnerability found!"
            else:
                message = f"{count} vulnerabilities found!"
            self._print(status_line("error:", message, Emphasis.ALERT))

    def print_vulnerability(self, vulnerability: Vulnerability, dependency_graph: DependencyGraph) -> None:
        advisory = vulnerability.advisory

        self._print()
        self.print_attr(Emphasis.ALERT, "ID:      ", advisory.id.value)
        self.print_attr(Emphasis.ALERT, "Crate:   ", vulnerability.package.name)
        self.print_attr(Emphasis.ALERT, "Version: ", vulnerability.package.version)
        self.print_attr(Emphasis.ALERT, "Date:    ", advisory.date)

        url = advisory.id.url() or advisory.url
        if url:
            self.print_attr(Emphasis.ALERT, "URL:     ", url)

        self.print_attr(Emphasis.ALERT, "Title:   ", advisory.title)
        self.print_attr(
            Emphasis.ALERT,
            "Solution: upgrade to",
            " OR ".join(vulnerability.versions.patched),
        )

        self.print_tree(Emphasis.ALERT, vulnerability.package, dependency_graph)

    def print_warning(self, warning: Warning) -> None:
        self._print()

        self.print_attr(Emphasis.CAUTION, "Crate:   ", warning.package)
        self.print_attr(Emphasis.ALERT, "Message: ", warning.message)

        if warning.url:
            self.print_attr(Emphasis.CAUTION, "URL:     ", warning.url)

    def print_attr(self, emphasis: Emphasis, attr: str, content: str) -> None:
        self._print(attr_line(emphasis, attr, content))

    def print_tree(self, emphasis: Emphasis, package: Package, dependency_graph: DependencyGraph) -> None:
        """Print the inverse dependency tree of a package, once per report."""
        if not self._mark_displayed(package.release()):
            return

        if not self.config.tree_enabled():
            return

        package_node = dependency_graph.node(package.release())

        self.print_attr(emphasis, "Dependency tree:", "")
        try:
            Tree(dependency_graph).print_node(package_node, self.console)
        except (OSError, ValueError) as e:
            raise OutputError(f"failed to write to output: {e}") from e

    def _mark_displayed(self, release: PackageRelease) -> bool:
        """Returns False when the release was already shown."""
        if release in self.displayed_packages:
            logging.debug(f"Dependency tree for {release} already displayed.")
            return False
        self.displayed_packages.add(release)
        return True

    def _print_json(self, report: Report) -> None:
        try:
            document = json.dumps(report.to_dict(), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"failed to serialize report: {e}") from e

        try:
            self.console.file.write(document)
            self.console.file.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"failed to write to output: {e}") from e

    def _print(self, line: Optional[Text] = None) -> None:
        try:
            if line is None:
                self.console.print()
            else:
                self.console.print(line, highlight=False, soft_wrap=True)
        except (OSError, ValueError) as e:
            raise OutputError(f"failed to write to output: {e}") from e
