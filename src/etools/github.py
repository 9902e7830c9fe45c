"""Minimal GitHub REST API client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from . import process
from .env import Environment
from .errors import AuthError, GitHubError

log = logging.getLogger("github")

GITHUB_API_URL = "https://api.github.com"
REQUIRED_SCOPE = "repo"


@dataclass(frozen=True, kw_only=True)
class PullRequest:
    """The subset of a GitHub pull request we care about."""

    owner: str
    repo: str
    number: int
    merge_commit_sha: str | None
    labels: list[str] = field(default_factory=list)


def _gh_token() -> str | None:
    result = process.run(["gh", "auth", "token"])
    token = result.stdout.strip()
    return token if result.ok and token else None


def resolve_token(env: Environment) -> str:
    """
    Return a GitHub token with `repo` scope.

    The ELECTRON_BUILD_TOOLS_GH_AUTH variable takes precedence. Otherwise
    we use the token stored by the `gh` tool, running its interactive
    login when there is none.

    Raises:
        AuthError: if we cannot obtain a token.
    """
    if env.gh_auth:
        log.debug("using token from the environment")
        return env.gh_auth
    token = _gh_token()
    if token:
        return token
    log.info("no stored GitHub credentials; starting `gh auth login`")
    process.run(["gh", "auth", "login", "--scopes", REQUIRED_SCOPE], capture=False)
    token = _gh_token()
    if not token:
        raise AuthError("cannot obtain a GitHub token: run `gh auth login --scopes repo`")
    return token


class GitHubClient:
    """Client for the few GitHub endpoints we use."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _get(self, path: str) -> tuple[requests.Response, Any]:
        url = f"{self.base_url}{path}"
        log.debug("GET %s", url)
        try:
            resp = self.session.get(url)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise GitHubError(f"GET {path} failed: {exc}") from exc
        try:
            return resp, resp.json()
        except ValueError as exc:
            raise GitHubError(f"GET {path} returned invalid JSON: {exc}") from exc

    def authenticated_login(self) -> str:
        """
        Return the login of the authenticated user.

        Raises:
            AuthError: if the token lacks the `repo` scope.
            GitHubError: if the request fails.
        """
        resp, data = self._get("/user")
        scopes = resp.headers.get("X-OAuth-Scopes")
        # Fine-grained tokens do not report scopes.
        if scopes is not None:
            granted = {scope.strip() for scope in scopes.split(",")}
            if REQUIRED_SCOPE not in granted:
                raise AuthError(f"GitHub token lacks the `{REQUIRED_SCOPE}` scope")
        try:
            return str(data["login"])
        except (KeyError, TypeError) as exc:
            raise GitHubError("GET /user returned no login") from exc

    def pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        """
        Fetch the given pull request.

        Raises:
            GitHubError: if the request fails.
        """
        path = f"/repos/{owner}/{repo}/pulls/{number}"
        _, data = self._get(path)
        try:
            return PullRequest(
                owner=owner,
                repo=repo,
                number=number,
                merge_commit_sha=data.get("merge_commit_sha") or None,
                labels=[label["name"] for label in data.get("labels") or []],
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise GitHubError(f"GET {path} returned a malformed pull request") from exc
