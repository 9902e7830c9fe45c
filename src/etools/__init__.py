"""Electron build tools.

This library provides helpers for the Electron development workflow:
a manual-backport assistant driving GitHub and git, and a provisioner
for the goma compiler-cache client used to speed up native builds.
"""

from .config import BuildConfig, GomaMode, GomaSource, load_config
from .env import Environment
from .goma import GomaClient

__all__ = [
    "BuildConfig",
    "Environment",
    "GomaClient",
    "GomaMode",
    "GomaSource",
    "load_config",
]
