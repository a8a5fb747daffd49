import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from lockscope.__version__ import __version__
from lockscope.app import AuditApp
from lockscope.config import DEFAULT_CONFIG_FILE, OutputFormat, load_config
from lockscope.errors import LockscopeError
from lockscope.presenter.style import Emphasis, status_line

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lockscope",
        description="Explain vulnerable dependencies found in a lockfile",
    )
    parser.add_argument(
        "lockfile",
        nargs="?",
        help="Lockfile to audit (detected in the current directory when omitted)",
    )
    parser.add_argument("--report", required=True, help="JSON audit report ('-' for stdin)")
    parser.add_argument("--json", action="store_true", help="Output the report as JSON")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress the scanning notice")
    parser.add_argument("--no-tree", action="store_true", help="Do not print dependency trees")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="Config file (TOML)")
    parser.add_argument("--log-file", help="Write debug logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """ Entrypoint when is installed via pip """
    args = build_parser().parse_args(argv)

    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG, filemode="w", format=LOG_FORMAT)
    else:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)

    try:
        output = load_config(args.config).output
        if args.json:
            output.format = OutputFormat.JSON
        if args.quiet:
            output.quiet = True
        if args.no_tree:
            output.show_tree = False

        return AuditApp(output, args.report, args.lockfile).run()
    except LockscopeError as e:
        logging.debug("Fatal error during audit:", exc_info=True)
        Console(stderr=True, highlight=False).print(
            status_line("error:", e.message, Emphasis.ALERT), soft_wrap=True
        )
        return e.exit_code


# Development mode
if __name__ == "__main__":
    sys.exit(main())
