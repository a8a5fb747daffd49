import enum
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from lockscope.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DEFAULT_CONFIG_FILE = "audit.toml"


class OutputFormat(enum.Enum):
    TERMINAL = "terminal"
    JSON = "json"


@dataclass
class OutputConfig:
    format: OutputFormat = OutputFormat.TERMINAL
    quiet: bool = False

    # None means "not configured", which shows the tree
    show_tree: Optional[bool] = None

    def is_quiet(self) -> bool:
        # Notices would corrupt the JSON document on stdout
        return self.quiet or self.format == OutputFormat.JSON

    def tree_enabled(self) -> bool:
        return True if self.show_tree is None else self.show_tree


@dataclass
class AuditConfig:
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: str = DEFAULT_CONFIG_FILE) -> AuditConfig:
    """Reads the [output] table of a TOML config file. A missing file means defaults."""
    if not os.path.exists(path):
        logging.debug(f"No config file at {path}, using defaults.")
        return AuditConfig()

    logging.debug(f"Loading config from {path}...")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config file {path}: {e}", source=path) from e

    output = data.get("output", {})
    if not isinstance(output, dict):
        raise ConfigError(f"[output] in {path} must be a table", source=path)

    config = OutputConfig()

    if "format" in output:
        try:
            config.format = OutputFormat(output["format"])
        except ValueError:
            choices = ", ".join(f.value for f in OutputFormat)
            raise ConfigError(
                f"invalid output format {output['format']!r} in {path} (expected one of: {choices})",
                source=path,
            ) from None

    for key in ("quiet", "show_tree"):
        if key in output:
            if not isinstance(output[key], bool):
                raise ConfigError(f"output.{key} in {path} must be true or false", source=path)
            setattr(config, key, output[key])

    return AuditConfig(output=config)
