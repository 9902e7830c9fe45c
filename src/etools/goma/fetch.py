"""Module to download, verify and extract goma client archives."""

from __future__ import annotations

import hashlib
import logging
import tarfile
import zipfile
from pathlib import Path

import requests
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from ..errors import CommandFailedError, DownloadError

log = logging.getLogger("goma/fetch")


def download(url: str, dest: Path, *, session: requests.Session | None = None) -> None:
    """
    Download the given URL into dest, showing a progress bar.

    A session is created, and closed afterwards, when none is given.

    Raises:
        DownloadError: if the download fails. Any partial file is removed.
    """
    if session is None:
        with requests.Session() as owned:
            download(url, dest, session=owned)
        return
    log.info("fetching %s... start", url)
    try:
        resp = session.get(url, stream=True)
        resp.raise_for_status()
        content_length = resp.headers.get("Content-Length")
        total = int(content_length) if content_length is not None else None
        with (
            Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                DownloadColumn(),
                TransferSpeedColumn(),
            ) as progress,
            open(dest, "wb") as fp,
        ):
            task_id = progress.add_task(dest.name, total=total)
            for chunk in resp.iter_content(chunk_size=8192):
                fp.write(chunk)
                progress.update(task_id, advance=len(chunk))
    except (requests.RequestException, OSError, ValueError) as exc:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"cannot download {url}: {exc}") from exc
    log.info("fetching %s... ok", url)


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()
    with open(path, "rb") as fp:
        while chunk := fp.read(8192):
            sha256.update(chunk)
    return sha256.hexdigest()


def extract(archive: Path, target_dir: Path) -> None:
    """
    Extract a `.tgz` or `.zip` archive into target_dir.

    Raises:
        CommandFailedError: if the archive cannot be extracted.
    """
    log.info("extracting %s... start", archive)
    try:
        if archive.name.endswith(".tgz"):
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(target_dir, filter="data")
        else:
            with zipfile.ZipFile(archive) as zfile:
                zfile.extractall(target_dir)
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as exc:
        raise CommandFailedError(f"Failed to extract goma: {exc}") from exc
    log.info("extracting %s... ok", archive)
