"""Module containing the build configuration.

A build configuration is a JSON file like the following:

{
  "root": "~/src/electron-gn",
  "goma": "cache-only",
  "goma_source": "msft"
}

Where `root` is the directory containing the `src/electron` checkout,
`goma` is one of `cache-only`, `cluster` or `none`, and `goma_source`
selects the goma client checksums to trust (omit it for the default).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dacite import Config, from_dict


class GomaMode(str, Enum):
    """How the build uses the goma compiler cache."""

    CACHE_ONLY = "cache-only"
    CLUSTER = "cluster"
    NONE = "none"


class GomaSource(str, Enum):
    """Which set of goma client checksums to trust."""

    DEFAULT = "default"
    MSFT = "msft"

    @classmethod
    def parse(cls, value: str | None) -> GomaSource:
        """Parse the given value, falling back to DEFAULT when unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT


@dataclass(frozen=True, kw_only=True)
class BuildConfig:
    """Configuration of a single Electron build directory."""

    root: Path
    goma: GomaMode = GomaMode.NONE
    goma_source: GomaSource = GomaSource.DEFAULT

    def electron_dir(self) -> Path:
        """Returns the path to the electron checkout."""
        return self.root / "src" / "electron"


_DACITE_CONFIG = Config(
    type_hooks={
        Path: lambda value: Path(value).expanduser(),
        GomaMode: GomaMode,
        GomaSource: GomaSource.parse,
    },
    strict=True,
)


def load_config(config_file: str | Path) -> BuildConfig:
    """
    Load the build configuration from the given JSON file.

    Raises:
        OSError: if the file cannot be read.
        json.JSONDecodeError: if the file is not valid JSON.
        dacite.DaciteError: if the fields have invalid types or are unknown.
        ValueError: if `goma` is not a valid mode.
    """
    with open(config_file) as filep:
        data = json.load(filep)
    return from_dict(BuildConfig, data, config=_DACITE_CONFIG)
