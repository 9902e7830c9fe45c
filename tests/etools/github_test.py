"""Tests for the etools.github module."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from etools import github
from etools.env import Environment
from etools.errors import AuthError, GitHubError
from etools.process import ProcessResult


def _response(payload, headers=None) -> MagicMock:
    resp = MagicMock()
    resp.raise_for_status = MagicMock()
    resp.json.return_value = payload
    resp.headers = headers or {}
    return resp


class TestResolveToken:
    """Tests for resolve_token."""

    def test_env_override_wins(self, fake_runner):
        with patch("etools.github.process.run", fake_runner):
            token = github.resolve_token(Environment(gh_auth="from-env"))
        assert token == "from-env"
        assert fake_runner.calls == []

    def test_stored_gh_token(self, fake_runner):
        fake_runner.on(
            lambda argv: argv[:3] == ["gh", "auth", "token"],
            ProcessResult(returncode=0, stdout="gho_stored\n"),
        )
        with patch("etools.github.process.run", fake_runner):
            token = github.resolve_token(Environment())
        assert token == "gho_stored"
        assert fake_runner.argvs() == [["gh", "auth", "token"]]

    def test_interactive_login_when_missing(self, fake_runner):
        tokens = iter(
            [
                ProcessResult(returncode=1, stderr="not logged in"),
                ProcessResult(returncode=0, stdout="gho_new"),
            ]
        )

        def runner(argv, **kwargs):
            fake_runner(argv, **kwargs)
            if argv[:3] == ["gh", "auth", "token"]:
                return next(tokens)
            return ProcessResult(returncode=0)

        with patch("etools.github.process.run", runner):
            token = github.resolve_token(Environment())

        assert token == "gho_new"
        login = fake_runner.find("login")
        assert len(login) == 1
        assert login[0]["argv"] == ["gh", "auth", "login", "--scopes", "repo"]
        assert login[0]["capture"] is False

    def test_no_token_at_all(self, fake_runner):
        fake_runner.on(
            lambda argv: argv[:3] == ["gh", "auth", "token"],
            ProcessResult(returncode=1),
        )
        with patch("etools.github.process.run", fake_runner), pytest.raises(AuthError):
            github.resolve_token(Environment())


class TestGitHubClient:
    """Tests for GitHubClient."""

    def test_sets_auth_header(self):
        session = MagicMock()
        session.headers = {}
        github.GitHubClient("tok", session=session)
        assert session.headers["Authorization"] == "Bearer tok"

    def test_authenticated_login(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response(
            {"login": "octocat"}, {"X-OAuth-Scopes": "read:org, repo, workflow"}
        )
        client = github.GitHubClient("tok", session=session)
        assert client.authenticated_login() == "octocat"
        session.get.assert_called_once_with("https://api.github.com/user")

    def test_authenticated_login_without_scope_header(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response({"login": "octocat"})
        client = github.GitHubClient("tok", session=session)
        assert client.authenticated_login() == "octocat"

    def test_missing_repo_scope(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response({"login": "octocat"}, {"X-OAuth-Scopes": "gist"})
        client = github.GitHubClient("tok", session=session)
        with pytest.raises(AuthError, match="repo"):
            client.authenticated_login()

    def test_pull_request(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response(
            {
                "merge_commit_sha": "abc123",
                "labels": [{"name": "needs-manual-bp/30-x-y"}, {"name": "semver/patch"}],
            }
        )
        client = github.GitHubClient("tok", session=session)
        pr = client.pull_request("electron", "electron", 42)
        session.get.assert_called_once_with(
            "https://api.github.com/repos/electron/electron/pulls/42"
        )
        assert pr.number == 42
        assert pr.merge_commit_sha == "abc123"
        assert pr.labels == ["needs-manual-bp/30-x-y", "semver/patch"]

    def test_pull_request_not_merged(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response({"merge_commit_sha": None, "labels": []})
        client = github.GitHubClient("tok", session=session)
        assert client.pull_request("electron", "electron", 1).merge_commit_sha is None

    def test_http_error(self):
        session = MagicMock()
        session.headers = {}
        resp = _response({})
        resp.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        session.get.return_value = resp
        client = github.GitHubClient("tok", session=session)
        with pytest.raises(GitHubError, match="404"):
            client.pull_request("electron", "electron", 1)

    def test_non_json_response(self):
        session = MagicMock()
        session.headers = {}
        resp = _response(None)
        resp.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        session.get.return_value = resp
        client = github.GitHubClient("tok", session=session)
        with pytest.raises(GitHubError, match="invalid JSON"):
            client.authenticated_login()

    def test_response_without_login(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response({"message": "hello"})
        client = github.GitHubClient("tok", session=session)
        with pytest.raises(GitHubError, match="no login"):
            client.authenticated_login()

    def test_malformed_labels(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response({"merge_commit_sha": "abc", "labels": [{"id": 1}]})
        client = github.GitHubClient("tok", session=session)
        with pytest.raises(GitHubError, match="malformed"):
            client.pull_request("electron", "electron", 1)
