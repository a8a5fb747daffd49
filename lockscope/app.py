import json
import logging
import os
import sys
from typing import Optional

from rich.console import Console

from lockscope.config import OutputConfig
from lockscope.core.model import Lockfile
from lockscope.core.report import Report
from lockscope.errors import LockfileNotFoundError, ReportFormatError
from lockscope.managers import detect_manager, manager_for
from lockscope.presenter import Presenter


def load_report(path: str) -> Report:
    """Reads a JSON audit report from a file, or from stdin when path is '-'."""
    logging.debug(f"Loading report from {path}...")
    try:
        if path == "-":
            data = json.load(sys.stdin)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
    except ValueError as e:
        raise ReportFormatError(f"invalid report {path}: {e}", source=path) from e
    except OSError as e:
        raise ReportFormatError(f"cannot read report {path}: {e}", source=path) from e

    return Report.from_dict(data)


class AuditApp:
    """Loads a lockfile and a report and prints the report."""

    def __init__(
        self,
        config: OutputConfig,
        report_path: str,
        lockfile_path: Optional[str] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config
        self.report_path = report_path
        self.lockfile_path = lockfile_path
        self.presenter = Presenter(config, console)

    def load_lockfile(self) -> Lockfile:
        if self.lockfile_path:
            manager = manager_for(self.lockfile_path)
            if not manager:
                raise LockfileNotFoundError(
                    f"{os.path.basename(self.lockfile_path)} is not a supported lockfile.",
                    source=self.lockfile_path,
                )
        else:
            manager, self.lockfile_path = detect_manager()
            if not manager:
                raise LockfileNotFoundError("No supported lockfile found.")

        logging.info(f"Manager: {manager.name}")
        return manager.load(self.lockfile_path)

    def run(self) -> int:
        """Returns the process exit status: 1 when vulnerabilities were found."""
        logging.info("Audit started.")

        lockfile = self.load_lockfile()
        self.presenter.before_report(self.lockfile_path, lockfile)

        report = load_report(self.report_path)
        self.presenter.print_report(report, lockfile)

        logging.info(f"Audit finished. {report.vulnerabilities.count} vulnerabilities.")
        return 1 if report.vulnerabilities.found else 0
