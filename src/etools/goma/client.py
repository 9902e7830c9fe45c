"""Module containing the goma client provisioner."""

from __future__ import annotations

import logging
import os
import re
import shutil
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Final

import requests

from .. import process
from ..config import BuildConfig
from ..env import Environment
from ..errors import CommandFailedError, IntegrityError
from ..process import Outcome
from . import fetch
from .platforms import GomaPlatform, archive_filename, current_platform, expected_sha
from .policy import composed_env

log = logging.getLogger("goma/client")

GOMA_BASE_URL: Final[str] = "https://dev-cdn.electronjs.org/goma-clients"

LOGIN_FRESHNESS: Final[timedelta] = timedelta(hours=12)

_LOGGED_IN_PATTERN = re.compile(r"^Login as (\w+\s\w+)$")


@dataclass(frozen=True)
class GomaPaths:
    """Paths of the goma files under the given tools directory."""

    tools_dir: Path

    @property
    def third_party_dir(self) -> Path:
        return self.tools_dir / "third_party"

    @property
    def goma_dir(self) -> Path:
        return self.third_party_dir / "goma"

    @property
    def gn_file(self) -> Path:
        return self.third_party_dir / "goma.gn"

    @property
    def sha_file(self) -> Path:
        return self.goma_dir / ".sha"

    @property
    def login_file(self) -> Path:
        return self.goma_dir / "last-known-login"

    def gn_contents(self) -> str:
        """Returns the desired contents of the goma.gn file."""
        return f'goma_dir = "{self.goma_dir}"\nuse_goma = true'


def tools_dir_or_default(tools_dir: str | Path | None) -> Path:
    """
    Return tools_dir as a Path if not empty. Otherwise return the
    default value for the tools_dir (i.e., `~/.electron_build_tools`).
    """
    return Path.home() / ".electron_build_tools" if tools_dir is None else Path(tools_dir)


class GomaClient:
    """
    Provisions, authenticates and starts the goma client.

    When goma_platform is None the host is unsupported and every
    operation is a no-op that does not touch the filesystem, the
    network or any process.
    """

    def __init__(
        self,
        *,
        paths: GomaPaths,
        goma_platform: GomaPlatform | None,
        env: Environment,
        config: BuildConfig | None = None,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.time,
        cpu_count: Callable[[], int | None] = os.cpu_count,
    ) -> None:
        self.paths = paths
        self.goma_platform = goma_platform
        self.env = env
        self.config = config
        self.session = session
        self.clock = clock
        self.cpu_count = cpu_count

    @property
    def supported(self) -> bool:
        return self.goma_platform is not None

    def _is_mac(self) -> bool:
        return self.goma_platform in (GomaPlatform.DARWIN, GomaPlatform.DARWIN_ARM64)

    def _is_windows(self) -> bool:
        return self.goma_platform == GomaPlatform.WIN32

    def _python(self, script: str, *args: str, **kwargs) -> process.ProcessResult:
        return process.run(
            [sys.executable, script, *args],
            cwd=self.paths.goma_dir,
            **kwargs,
        )

    def expected_sha(self) -> str | None:
        """Return the checksum we expect for this platform and source."""
        if self.goma_platform is None:
            return None
        source = self.config.goma_source if self.config is not None else None
        return expected_sha(self.goma_platform, source)

    def installed_sha(self) -> str | None:
        """Return the checksum recorded for the installed client, if any."""
        if not self.supported or not self.paths.sha_file.exists():
            return None
        return self.paths.sha_file.read_text()

    def sync_gn_file(self) -> bool:
        """Write the goma.gn file if needed and return whether we wrote it."""
        if not self.supported:
            return False
        contents = self.paths.gn_contents()
        gn_file = self.paths.gn_file
        if gn_file.exists() and gn_file.read_text() == contents:
            return False
        log.info("writing new goma.gn file %s", gn_file)
        gn_file.parent.mkdir(parents=True, exist_ok=True)
        gn_file.write_text(contents)
        return True

    def download_and_prepare(self) -> str | None:
        """
        Make sure the client matching the expected checksum is installed.

        Returns:
            The installed checksum, or None if the platform is unsupported.

        Raises:
            DownloadError: if the download fails.
            IntegrityError: if the downloaded archive has the wrong checksum.
            CommandFailedError: if the archive cannot be extracted.
        """
        if self.goma_platform is None:
            return None

        self.paths.third_party_dir.mkdir(parents=True, exist_ok=True)
        self.sync_gn_file()

        sha = self.expected_sha()
        assert sha is not None
        if self.installed_sha() == sha and not self.env.force_redownload:
            log.debug("goma %s already installed", sha)
            return sha

        filename = archive_filename(self.goma_platform)
        if (self.paths.goma_dir / "goma_ctl.py").exists():
            # The old client may not be running.
            _ = self._python("goma_ctl.py", "stop")

        tmp_download = self.paths.third_party_dir / filename
        if self.paths.goma_dir.exists():
            shutil.rmtree(self.paths.goma_dir)
        tmp_download.unlink(missing_ok=True)

        url = f"{GOMA_BASE_URL}/{sha}/{filename}"
        log.info("downloading %s into %s", url, tmp_download)
        fetch.download(url, tmp_download, session=self.session)

        log.info("validating %s... start", tmp_download)
        got = fetch.compute_sha256(tmp_download)
        if got != sha:
            tmp_download.unlink(missing_ok=True)
            raise IntegrityError(
                f"Got hash for downloaded file {got} which did not match {sha}. Halting now"
            )
        log.info("validating %s... ok", tmp_download)

        fetch.extract(tmp_download, self.paths.third_party_dir)
        tmp_download.unlink(missing_ok=True)
        self.paths.goma_dir.mkdir(parents=True, exist_ok=True)
        self.paths.sha_file.write_text(sha)
        return sha

    def last_known_login(self) -> datetime | None:
        """Return the time of the last recorded login, if any."""
        if not self.supported or not self.paths.login_file.exists():
            return None
        try:
            millis = int(self.paths.login_file.read_text().strip())
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            log.warning("ignoring malformed %s", self.paths.login_file)
            return None

    def record_login_time(self) -> None:
        """Record that we have just logged in."""
        self.paths.login_file.parent.mkdir(parents=True, exist_ok=True)
        self.paths.login_file.write_text(str(int(self.clock() * 1000)))

    def clear_login_time(self) -> Outcome:
        """Forget the last recorded login."""
        if not self.supported or not self.paths.login_file.exists():
            return Outcome.NOT_APPLICABLE
        self.paths.login_file.unlink()
        return Outcome.SUCCESS

    def _login_is_fresh(self) -> bool:
        last = self.last_known_login()
        if last is None:
            return False
        now = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        return now - last < LOGIN_FRESHNESS

    def is_authenticated(self) -> bool:
        """
        Return whether goma is authenticated.

        A login recorded in the last 12 hours is assumed to still be
        valid. Otherwise we ask `goma_auth.py info` and any failure to
        run it counts as not authenticated.
        """
        if not self.supported:
            return False
        if self._login_is_fresh():
            return True
        result = self._python("goma_auth.py", "info")
        if not result.ok:
            log.debug("goma_auth.py info failed: %s", result.stderr.strip())
            return False
        return _LOGGED_IN_PATTERN.match(result.stdout.strip()) is not None

    def auth(self) -> Outcome:
        """
        Download goma if needed and log in unless already authenticated.

        Raises:
            CommandFailedError: if the login fails.
            DownloadError, IntegrityError: see download_and_prepare.
        """
        if not self.supported:
            return Outcome.NOT_APPLICABLE

        self.download_and_prepare()
        if self.is_authenticated():
            return Outcome.SUCCESS

        result = self._python(
            "goma_auth.py",
            "login",
            env={"AGREE_NOTGOMA_TOS": "1"},
            capture=False,
        )
        if not result.ok:
            message = "Failed to run command:"
            if result.returncode is not None:
                message += f'\n Exit Code: "{result.returncode}"'
            if result.stderr:
                message += f"\n {result.stderr.strip()}"
            raise CommandFailedError(message, returncode=result.returncode)

        self.record_login_time()
        return Outcome.SUCCESS

    def is_running(self) -> bool:
        """Return whether the compiler proxy answers on its control port."""
        if not self.supported:
            return False
        gomacc = self.paths.goma_dir / ("gomacc.exe" if self._is_windows() else "gomacc")
        return process.run([gomacc, "port", "2"]).ok

    def start_env(self) -> dict[str, str]:
        """Return the environment used to start the compiler proxy."""
        result = composed_env(self.config, self.env)
        if self._is_mac():
            cpus = str(self.cpu_count() or 1)
            result["GOMA_MAX_SUBPROCS"] = cpus
            result["GOMA_MAX_SUBPROCS_LOW"] = cpus
        return result

    def ensure_start(self) -> Outcome:
        """
        Start the compiler proxy unless it is already running.

        Raises:
            CommandFailedError: if the proxy fails to start.
        """
        if not self.supported:
            return Outcome.NOT_APPLICABLE
        if self.is_running():
            log.debug("goma compiler proxy already running")
            return Outcome.SUCCESS

        log.info("starting goma compiler proxy")
        # On Windows ensure_start never returns unless attached to the terminal.
        result = self._python(
            "goma_ctl.py",
            "ensure_start",
            env=self.start_env(),
            capture=not self._is_windows(),
        )
        if not result.ok:
            raise CommandFailedError("Failed to start goma", returncode=result.returncode)
        return Outcome.SUCCESS


def create(
    *,
    env: Environment,
    config: BuildConfig | None = None,
    tools_dir: str | Path | None = None,
) -> GomaClient:
    """Helper function to create a GomaClient for the current host."""
    return GomaClient(
        paths=GomaPaths(tools_dir_or_default(tools_dir)),
        goma_platform=current_platform(),
        env=env,
        config=config,
    )
