"""Module containing the process environment snapshot."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_GH_AUTH = "ELECTRON_BUILD_TOOLS_GH_AUTH"
ENV_FORCE_REDOWNLOAD = "ELECTRON_FORGE_GOMA_REDOWNLOAD"
ENV_RAW_GOMA_AUTH = "RAW_GOMA_AUTH"
ENV_CI = "CI"


@dataclass(frozen=True, kw_only=True)
class Environment:
    """
    Environment variables relevant to the build tools.

    Read once at startup using from_environ() and never mutated. An
    empty variable is treated like an unset one.

    Attributes:
        gh_auth: GitHub token overriding the stored credentials.
        force_redownload: re-download goma even when the checksum matches.
        raw_goma_auth: whether raw goma credentials were provided.
        ci: whether we are running under continuous integration.
    """

    gh_auth: str | None = None
    force_redownload: bool = False
    raw_goma_auth: bool = False
    ci: bool = False

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Environment:
        """Build the snapshot from the given mapping (default: os.environ)."""
        environ = os.environ if environ is None else environ
        return cls(
            gh_auth=environ.get(ENV_GH_AUTH) or None,
            force_redownload=bool(environ.get(ENV_FORCE_REDOWNLOAD)),
            raw_goma_auth=bool(environ.get(ENV_RAW_GOMA_AUTH)),
            ci=bool(environ.get(ENV_CI)),
        )
