"""Shared pytest fixtures for etools tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from etools.process import ProcessResult


class FakeRunner:
    """
    Stand-in for etools.process.run recording every call.

    Handlers map a predicate over the stringified argv to the result
    to return. Unmatched calls succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self._handlers: list[tuple[Callable[[list[str]], bool], ProcessResult]] = []

    def on(self, predicate: Callable[[list[str]], bool], result: ProcessResult) -> None:
        self._handlers.insert(0, (predicate, result))

    def __call__(self, argv, *, cwd=None, env=None, capture=True) -> ProcessResult:
        args = [str(arg) for arg in argv]
        self.calls.append({"argv": args, "cwd": cwd, "env": env, "capture": capture})
        for predicate, result in self._handlers:
            if predicate(args):
                return result
        return ProcessResult(returncode=0)

    def argvs(self) -> list[list[str]]:
        return [call["argv"] for call in self.calls]

    def find(self, *needle: str) -> list[dict]:
        """Return the calls whose argv contains all the given items."""
        return [call for call in self.calls if all(n in call["argv"] for n in needle)]


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    """Remove the stderr handlers installed by configure_logging after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    """Return an empty tools directory."""
    path = tmp_path / "tools"
    path.mkdir()
    return path
