"""Module mapping the host to a goma client platform."""

from __future__ import annotations

import functools
import logging
import platform
import sys
from enum import Enum
from typing import Final

from .. import process
from ..config import GomaSource

log = logging.getLogger("goma/platforms")


class GomaPlatform(str, Enum):
    """Platforms for which we ship a goma client."""

    DARWIN = "darwin"
    DARWIN_ARM64 = "darwin-arm64"
    LINUX = "linux"
    WIN32 = "win32"


GOMA_PLATFORM_SHAS: Final[dict[GomaPlatform, str]] = {
    GomaPlatform.DARWIN: "bc4bdbe0f687cb6bf1848500704cfa24bc5bee167e768bc6c5c689417c0c44c0",
    GomaPlatform.DARWIN_ARM64: "29e3e20903c780c717a1fbeb6be78ce40d70e136d1949eec6307ad11aade9447",
    GomaPlatform.LINUX: "c105c1a4d06761a4bfcae70789e757f409e4fdf4423b50328c5864bf3d639561",
    GomaPlatform.WIN32: "d7578905bb8c0d01249fc1ec6cfb7bfa6a68580ac7f5f5b95b653bce07ba8bf1",
}

MSFT_GOMA_PLATFORM_SHAS: Final[dict[GomaPlatform, str]] = {
    GomaPlatform.DARWIN: "4738c5447b8a7bafbb6adb9df01b2f571b492ada862bd3e296892faf5b617df1",
    GomaPlatform.DARWIN_ARM64: "4d2a6d98ecd5214731c089622991334e083f42100bca194a087dde7136a07fc8",
    GomaPlatform.LINUX: "dd6285146677b0134fb9b4a0b4f8341c7e57a9b4ef82db158de95f7fed5b72e2",
    GomaPlatform.WIN32: "06b6c1d5c924a7415395545ee7a99b926829fc104336830ce6385b7ba67576cd",
}

GOMA_PLATFORM_FILENAMES: Final[dict[GomaPlatform, str]] = {
    GomaPlatform.DARWIN: "goma-mac.tgz",
    GomaPlatform.DARWIN_ARM64: "goma-mac-arm64.tgz",
    GomaPlatform.LINUX: "goma-linux.tgz",
    GomaPlatform.WIN32: "goma-win.zip",
}

_ARM64_MACHINES = ("arm64", "aarch64")


def resolve_platform(
    os_name: str,
    machine: str,
    *,
    translated: bool = False,
) -> GomaPlatform | None:
    """
    Map an OS name (as in sys.platform) and machine to a GomaPlatform.

    On macOS, both a native arm64 machine and an x86_64 process running
    under Rosetta translation map to DARWIN_ARM64.

    Returns:
        The platform, or None if the host is not supported.
    """
    if os_name == "darwin":
        if machine.lower() in _ARM64_MACHINES or translated:
            return GomaPlatform.DARWIN_ARM64
        return GomaPlatform.DARWIN
    if os_name.startswith("linux"):
        return GomaPlatform.LINUX
    if os_name == "win32":
        return GomaPlatform.WIN32
    return None


def _is_rosetta_translated() -> bool:
    result = process.run(["sysctl", "-in", "sysctl.proc_translated"])
    return result.ok and result.stdout.strip() == "1"


@functools.cache
def current_platform() -> GomaPlatform | None:
    """Return the GomaPlatform of this host, computed once per process."""
    machine = platform.machine()
    translated = sys.platform == "darwin" and _is_rosetta_translated()
    resolved = resolve_platform(sys.platform, machine, translated=translated)
    log.debug("goma platform for %s/%s: %s", sys.platform, machine, resolved)
    return resolved


def expected_sha(goma_platform: GomaPlatform, source: GomaSource | None = None) -> str:
    """Return the trusted archive checksum for the given platform and source."""
    if source == GomaSource.MSFT:
        return MSFT_GOMA_PLATFORM_SHAS[goma_platform]
    return GOMA_PLATFORM_SHAS[goma_platform]


def archive_filename(goma_platform: GomaPlatform) -> str:
    """Return the archive file name for the given platform."""
    return GOMA_PLATFORM_FILENAMES[goma_platform]
