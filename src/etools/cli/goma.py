"""Goma command group."""

import click
from rich.console import Console

from ..goma import client as goma_client
from ..goma.client import GomaClient
from ..interceptor import Interceptor
from ..process import Outcome
from . import State, cli, pass_state


def _client(state: State) -> GomaClient:
    return goma_client.create(env=state.env, config=state.config, tools_dir=state.tools_dir)


def _not_supported() -> None:
    click.echo("goma is not supported on this platform.")


@cli.group()
def goma() -> None:
    """Manage the goma compiler cache client."""


@goma.command()
@pass_state
def download(state: State) -> None:
    """Download and verify the goma client if needed."""
    interceptor = Interceptor()
    with interceptor:
        sha = _client(state).download_and_prepare()
        if sha is None:
            _not_supported()
        else:
            click.echo(f"goma client {sha} is installed.")
    if interceptor.failed:
        raise SystemExit(interceptor.exitcode())


@goma.command()
@pass_state
def auth(state: State) -> None:
    """Download goma if needed and log in."""
    interceptor = Interceptor()
    with interceptor:
        if _client(state).auth() == Outcome.NOT_APPLICABLE:
            _not_supported()
    if interceptor.failed:
        raise SystemExit(interceptor.exitcode())


@goma.command()
@pass_state
def ensure(state: State) -> None:
    """Start the goma compiler proxy unless it is already running."""
    interceptor = Interceptor()
    with interceptor:
        if _client(state).ensure_start() == Outcome.NOT_APPLICABLE:
            _not_supported()
    if interceptor.failed:
        raise SystemExit(interceptor.exitcode())


@goma.command()
@pass_state
def status(state: State) -> None:
    """Show the goma client status."""
    client = _client(state)
    if not client.supported:
        _not_supported()
        return
    last_login = client.last_known_login()
    console = Console()
    console.print(f"platform:      {client.goma_platform.value}")
    console.print(f"directory:     {client.paths.goma_dir}")
    console.print(f"expected sha:  {client.expected_sha()}")
    console.print(f"installed sha: {client.installed_sha() or '[red]none[/]'}")
    console.print(f"last login:    {last_login.isoformat() if last_login else '[red]never[/]'}")
    console.print(f"authenticated: {client.is_authenticated()}")
    console.print(f"running:       {client.is_running()}")


@goma.command("clear-login")
@pass_state
def clear_login(state: State) -> None:
    """Forget the last recorded goma login."""
    if _client(state).clear_login_time() == Outcome.SUCCESS:
        click.echo("Cleared the last known goma login.")
    else:
        click.echo("No goma login recorded.")


@goma.command("env")
@pass_state
def env_cmd(state: State) -> None:
    """Print the environment used to start goma."""
    for key, value in sorted(_client(state).start_env().items()):
        click.echo(f"{key}={value}")
