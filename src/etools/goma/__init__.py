"""
Provisioning of the goma compiler-cache client.

We download a platform-specific goma client archive, verify its SHA256,
extract it, and then authenticate and start the compiler proxy. The
on-disk layout under the tools directory is:

    $toolsdir/third_party/goma.gn
    $toolsdir/third_party/goma/
    $toolsdir/third_party/goma/.sha
    $toolsdir/third_party/goma/last-known-login

Where `goma.gn` points GN at the client, `.sha` records the checksum of
the installed archive, and `last-known-login` records the last login
time in milliseconds since the epoch.
"""

from .client import GomaClient, GomaPaths
from .platforms import GomaPlatform, current_platform
from .policy import composed_env, is_cache_only

__all__ = [
    "GomaClient",
    "GomaPaths",
    "GomaPlatform",
    "composed_env",
    "current_platform",
    "is_cache_only",
]
