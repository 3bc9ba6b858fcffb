from __future__ import annotations

from pathlib import Path

import typer

from smarttag import __version__
from smarttag.cli.commands.inspect_cmd import plan, tags, validate
from smarttag.cli.commands.release_cmd import release
from smarttag.cli.context import GlobalOptions

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Commands
app.command()(tags)
app.command()(validate)
app.command()(plan)
app.command()(release)


def _print_version(value: bool) -> None:
    # Eager: runs while parsing, before click asks for a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository path (default: the repository containing the current directory).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: smarttag.toml or [tool.smarttag] in pyproject.toml).",
    ),
) -> None:
    del version
    ctx.obj = GlobalOptions(repo=repo, config=config)


def main() -> None:
    app()
