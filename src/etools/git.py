"""Thin wrapper around the git command line."""

from __future__ import annotations

from pathlib import Path

from . import process
from .process import ProcessResult


class Git:
    """Run git commands inside a working copy."""

    def __init__(self, workdir: str | Path) -> None:
        self.workdir = Path(workdir)

    def _run(self, *args: str, capture: bool = True) -> ProcessResult:
        return process.run(["git", *args], cwd=self.workdir, capture=capture)

    def status_porcelain(self) -> ProcessResult:
        return self._run("status", "--porcelain")

    def checkout(self, branch: str) -> ProcessResult:
        return self._run("checkout", branch)

    def pull(self, remote: str, branch: str) -> ProcessResult:
        return self._run("pull", remote, branch)

    def delete_branch(self, branch: str) -> ProcessResult:
        return self._run("branch", "-D", branch)

    def create_branch(self, branch: str) -> ProcessResult:
        """Create the given branch from HEAD and check it out."""
        return self._run("checkout", "-b", branch)

    def cherry_pick(self, commit: str) -> ProcessResult:
        """Cherry-pick the given commit with output attached to the terminal."""
        return self._run("cherry-pick", commit, capture=False)
