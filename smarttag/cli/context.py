from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from smarttag.core.config import Config, find_config, load_config
from smarttag.core.errors import ErrorCode
from smarttag.core.result import Err
from smarttag.git.repository import GitRepository
from smarttag.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the subcommand (``smarttag --repo X release ...``)."""

    repo: Path | None = None
    config: Path | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: GitRepository
    config: Config
    console: ConsoleProtocol


def global_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.find_root().obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions()


def build_context(options: GlobalOptions, *, console: ConsoleProtocol | None = None) -> CLIContext:
    start = (options.repo or Path.cwd()).expanduser()
    discovered = GitRepository.discover(start)
    if isinstance(discovered, Err):
        typer.echo(f"error: {discovered.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    root = discovered.value.path

    config = Config()
    config_path = options.config or find_config(root)
    if config_path is not None:
        loaded = load_config(config_path)
        if isinstance(loaded, Err):
            typer.echo(f"error: {loaded.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = loaded.value

    return CLIContext(
        repo=GitRepository(root, remote=config.git.remote),
        config=config,
        console=console or RichConsole(),
    )
