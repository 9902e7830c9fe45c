"""Backport command."""

from pathlib import Path

import click
from rich.console import Console

from .. import backport as _backport
from ..interceptor import Interceptor
from . import State, cli, pass_state


def _choose_branch(branches: list[str]) -> str:
    return click.prompt(
        "Which branch do you want to backport this PR to?",
        type=click.Choice(branches),
    )


def _print_next_steps(console: Console) -> None:
    console.print()
    console.print(
        "[cyan]Cherry pick complete, fix conflicts locally and then run the following "
        'commands "[yellow]git cherry-pick --continue[/]", "[yellow]git push[/]" and '
        'finally "[yellow]e pr[/]" to create your new pull request[/]',
        soft_wrap=True,
    )


@cli.command()
@click.argument("pr")
@pass_state
def backport(state: State, pr: str) -> None:
    """Assists with manual backport processes.

    Cherry-picks the merge commit of the given Electron pull request
    onto a new branch based on one of the branches named by its
    `needs-manual-bp/<branch>` labels.
    """
    workdir = state.config.electron_dir() if state.config is not None else Path.cwd()
    interceptor = Interceptor()
    with interceptor:
        pr_number = _backport.parse_pr_number(pr)
        backporter = _backport.create(env=state.env, workdir=workdir, choose=_choose_branch)
        backporter.run(pr_number)
        _print_next_steps(Console())
    if interceptor.failed:
        raise SystemExit(interceptor.exitcode())
