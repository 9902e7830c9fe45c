"""Manual backport assistant.

Given a merged Electron pull request labeled `needs-manual-bp/<branch>`,
we prepare a local branch off `<branch>` with the merge commit
cherry-picked on top, leaving conflict resolution to the developer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from . import github
from .env import Environment
from .errors import CommandFailedError, InputValidationError, PreconditionError
from .git import Git
from .process import ProcessResult

log = logging.getLogger("backport")

REPO_OWNER = "electron"
REPO_NAME = "electron"
MANUAL_BP_LABEL_PREFIX = "needs-manual-bp/"


@dataclass(frozen=True, kw_only=True)
class BackportResult:
    """Outcome of a completed backport setup."""

    pr_number: int
    target_branch: str
    branch: str
    merge_commit_sha: str


def parse_pr_number(text: str) -> int:
    """
    Parse a pull request number.

    Only the canonical decimal form of a non-negative integer is
    accepted, so "042", "4a", "+4" and "" are all rejected.

    Raises:
        InputValidationError: if the value is not a canonical number.
    """
    if text.isascii() and text.isdigit() and str(int(text)) == text:
        return int(text)
    raise InputValidationError(f'backport requires a number, "{text}" was provided')


def backport_targets(labels: list[str]) -> list[str]:
    """Return the branches named by `needs-manual-bp/` labels, in label order."""
    return [
        label[len(MANUAL_BP_LABEL_PREFIX) :]
        for label in labels
        if label.startswith(MANUAL_BP_LABEL_PREFIX)
    ]


def backport_branch_name(login: str, pr_number: int, target_branch: str) -> str:
    """Returns the name of the local branch for the given backport."""
    return f"manual-bp/{login}/pr/{pr_number}/branch/{target_branch}"


class Backporter:
    """
    Drives a manual backport from a GitHub pull request to a local branch.

    Arguments:
        client: the GitHub client to use.
        git: the git wrapper bound to the electron working copy.
        choose: callable picking one branch among the candidates.
    """

    def __init__(
        self,
        *,
        client: github.GitHubClient,
        git: Git,
        choose: Callable[[list[str]], str],
    ) -> None:
        self.client = client
        self.git = git
        self.choose = choose

    def run(self, pr_number: int) -> BackportResult:
        """
        Prepare the backport branch and cherry-pick the merge commit.

        Raises:
            PreconditionError: if the PR is not merged, has no backport
                labels, or the working copy is not clean.
            CommandFailedError: if a git command fails.
            GitHubError, AuthError: if talking to GitHub fails.
        """
        login = self.client.authenticated_login()
        pr = self.client.pull_request(REPO_OWNER, REPO_NAME, pr_number)
        if not pr.merge_commit_sha:
            raise PreconditionError("No merge SHA available on PR")

        targets = backport_targets(pr.labels)
        if not targets:
            raise PreconditionError("The given pull request is not needing any manual backports yet")

        target = self.choose(targets)
        if not target:
            raise InputValidationError("no target branch selected")

        status = self.git.status_porcelain()
        if not status.ok or status.stdout.strip():
            raise PreconditionError(
                "Your current git working directory is not clean, we won't "
                "erase your local changes. Clean it up and try again"
            )

        self._check(self.git.checkout(target), "Failed to checkout base branch")
        self._check(self.git.pull("origin", target), "Failed to update base branch")

        branch = backport_branch_name(login, pr_number, target)
        # The branch may not exist yet.
        _ = self.git.delete_branch(branch)
        self._check(self.git.create_branch(branch), f'Failed to checkout new branch "{branch}"')

        # Conflicts are expected and left to the developer.
        result = self.git.cherry_pick(pr.merge_commit_sha)
        log.debug("cherry-pick of %s: %s", pr.merge_commit_sha, result.outcome().value)

        return BackportResult(
            pr_number=pr_number,
            target_branch=target,
            branch=branch,
            merge_commit_sha=pr.merge_commit_sha,
        )

    @staticmethod
    def _check(result: ProcessResult, message: str) -> None:
        if not result.ok:
            log.debug("git stderr: %s", result.stderr.strip())
            raise CommandFailedError(message, returncode=result.returncode)


def create(
    *,
    env: Environment,
    workdir: str | Path,
    choose: Callable[[list[str]], str],
) -> Backporter:
    """
    Helper function to create a Backporter.

    Resolves the GitHub token first, so this may run an interactive login.
    """
    token = github.resolve_token(env)
    return Backporter(
        client=github.GitHubClient(token),
        git=Git(workdir),
        choose=choose,
    )
