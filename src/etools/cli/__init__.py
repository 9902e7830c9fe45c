"""Electron build tools command-line interface."""

from dataclasses import dataclass
from importlib.metadata import version
from pathlib import Path

import click
from dacite import DaciteError

from ..config import BuildConfig, load_config
from ..env import Environment
from .logger import configure_logging

_PACKAGE_NAME = "electron-build-tools"


def _get_version() -> str:
    """Return the installed package version string."""
    return version(_PACKAGE_NAME)


@dataclass(frozen=True, kw_only=True)
class State:
    """Settings shared by all subcommands."""

    env: Environment
    config: BuildConfig | None
    tools_dir: Path | None


pass_state = click.make_pass_decorator(State)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s", package_name=_PACKAGE_NAME)
@click.option(
    "-c",
    "--config",
    "config_file",
    envvar="EVM_CONFIG",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Build configuration JSON file",
)
@click.option(
    "--tools-dir",
    envvar="ELECTRON_BUILD_TOOLS_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for downloaded tools (default: ~/.electron_build_tools)",
)
@click.option("-v", "--verbose", is_flag=True, help="Run in verbose mode")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, tools_dir: Path | None, verbose: bool) -> None:
    """Electron build tools command-line tool."""
    configure_logging(verbose)
    config = None
    if config_file is not None:
        try:
            config = load_config(config_file)
        except (OSError, ValueError, DaciteError) as exc:
            raise click.BadParameter(str(exc), param_hint="--config") from exc
    ctx.obj = State(env=Environment.from_environ(), config=config, tools_dir=tools_dir)


@cli.command(hidden=True)
def help() -> None:
    """Show usage information."""
    click.echo('Use "e --help" for usage information.')
    click.echo('Use "e <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(_get_version())


# Register subcommands (must be after cli is defined)
from . import backport as _backport  # noqa: E402, F401
from . import goma as _goma  # noqa: E402, F401
