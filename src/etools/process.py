"""Module to run external commands without raising on failure."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

log = logging.getLogger("process")


class Outcome(str, Enum):
    """Result of a best-effort operation."""

    SUCCESS = "success"
    FAILURE = "failure"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True, kw_only=True)
class ProcessResult:
    """
    Result of running an external command.

    Attributes:
        returncode: the exit status, or None if the command could not start.
        stdout: the captured standard output ("" when not captured).
        stderr: the captured standard error, or the spawn error.
    """

    returncode: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def outcome(self) -> Outcome:
        """Convert to an Outcome."""
        return Outcome.SUCCESS if self.ok else Outcome.FAILURE


def run(
    argv: Sequence[str | Path],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool = True,
) -> ProcessResult:
    """
    Run the given command and wait for it to complete.

    Arguments:
        argv: the command and its arguments.
        cwd: the working directory (default: the current directory).
        env: variables to add to the current environment.
        capture: capture the output if True, otherwise attach it to the terminal.

    Returns:
        A ProcessResult. This function does not raise when the command
        exits with a non-zero status or cannot be started: callers
        inspect the result and decide whether that is fatal.
    """
    args = [str(arg) for arg in argv]
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)
    log.debug("running %s in %s", args, cwd or ".")
    try:
        completed = subprocess.run(
            args,
            cwd=cwd,
            env=full_env,
            stdin=subprocess.DEVNULL if capture else None,
            capture_output=capture,
            text=True,
            check=False,
        )
    except OSError as exc:
        log.debug("cannot run %s: %s", args, exc)
        return ProcessResult(returncode=None, stderr=str(exc))
    log.debug("%s exited with %d", args, completed.returncode)
    return ProcessResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
