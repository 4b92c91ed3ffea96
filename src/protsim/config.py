"""
Settings files for the protsim command line tool.

Settings are read once into an immutable Settings object that is passed
explicitly to the code that needs it. Files use one `key = value` setting
per line; lines starting with '#' are comments.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .compatibility import CompatibilityConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "protsim.cfg"
HOME_CONFIG_FILE_NAME = ".protsim.cfg"

_TRUE = {"yes", "true", "1", "on"}
_FALSE = {"no", "false", "0", "off"}


def read_config_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Parse a `key = value` settings file.

    Malformed lines are skipped with a warning.

    Args:
        path: File to read.

    Returns:
        Mapping of setting names to their raw string values.
    """
    options = {}
    with open(path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            key, sep, value = line.partition('=')
            key, value = key.strip(), value.strip()
            if not sep or not key or not value:
                logger.warning("Could not parse line %d of config file '%s', skipping line.", line_number, path)
                continue
            options[key] = value
    return options


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"Setting '{key}' expects yes/no, got {value!r}")


def _parse_keys(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(',') if part.strip())


@dataclass(frozen=True)
class Settings:
    """Tool settings after defaults and settings files have been applied."""
    output_path: str = "./"
    silent: bool = False
    write_mapping_files: bool = True
    edge_attributes: Tuple[str, ...] = ("spatial",)
    vertex_attributes: Tuple[str, ...] = ("sse_type",)

    def compatibility(self) -> CompatibilityConfig:
        return CompatibilityConfig(edge_attributes=self.edge_attributes,
                                   vertex_attributes=self.vertex_attributes).validate()

    def updated(self, options: Dict[str, str]) -> "Settings":
        """
        Return a copy with the given raw options applied.

        Unknown keys are ignored with a warning.

        Raises:
            ConfigurationError: If a value cannot be converted.
        """
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in options.items():
            if key not in known:
                logger.warning("Ignoring unknown setting '%s'", key)
                continue
            if key in ("silent", "write_mapping_files"):
                changes[key] = _parse_bool(key, value)
            elif key in ("edge_attributes", "vertex_attributes"):
                changes[key] = _parse_keys(value)
            else:
                changes[key] = value
        return replace(self, **changes)


def find_config_file(home: Optional[Union[str, Path]] = None,
                     cwd: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Locate the settings file.

    A `.protsim.cfg` in the user's home directory takes precedence over a
    `protsim.cfg` in the current directory.
    """
    if home is None:
        home = os.environ.get("HOME")
    if home:
        candidate = Path(home) / HOME_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    candidate = Path(cwd or Path.cwd()) / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def load_settings(home: Optional[Union[str, Path]] = None,
                  cwd: Optional[Union[str, Path]] = None) -> Settings:
    """Build Settings from defaults and the first settings file found."""
    settings = Settings()
    path = find_config_file(home=home, cwd=cwd)
    if path is None:
        logger.info("No config file found, using internal default settings.")
        return settings
    logger.info("Parsing config file from '%s'.", path)
    return settings.updated(read_config_file(path))
