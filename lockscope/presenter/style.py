"""Styling primitives shared by the presenter and the tree renderer."""

import enum

from rich.style import Style
from rich.text import Text

STATUS_WIDTH = 12


class Emphasis(enum.Enum):
    ALERT = "red"
    CAUTION = "yellow"
    SUCCESS = "green"

    @property
    def style(self) -> Style:
        return Style(color=self.value, bold=True)


def attr_line(emphasis: Emphasis, attr: str, content: str) -> Text:
    """A bold colored label followed by plain content."""
    line = Text(attr, style=emphasis.style)
    if content:
        line.append(" ")
        line.append(content)
    return line


def status_line(status: str, message: str, emphasis: Emphasis, justified: bool = False) -> Text:
    """
    Cargo-style status line, e.g. "    Scanning Cargo.lock ..." or "error: ...".
    Justified labels are right-aligned to STATUS_WIDTH columns.
    """
    label = status.rjust(STATUS_WIDTH) if justified else status
    return attr_line(emphasis, label, message)
