from __future__ import annotations

import json
from pathlib import Path

import typer

from smarttag.cli.commands._helpers import (
    exit_release_error,
    exit_with_code,
    release_error_code,
)
from smarttag.cli.context import build_context, global_options
from smarttag.cli.render import render_smart_result, render_tag_result
from smarttag.core.errors import ErrorCode
from smarttag.core.result import Err
from smarttag.output.console import RichConsole
from smarttag.release.gh import GhReleaseHost, ensure_gh_auth, ensure_gh_available
from smarttag.release.model import ReleaseOptions, SmartReleaseResult, TagReleaseResult
from smarttag.release.orchestrator import create_release, create_smart_release
from smarttag.release.version import normalize_tag


def _read_notes(notes: str | None, notes_file: Path | None) -> str:
    if notes is not None and notes_file is not None:
        typer.echo("error: --notes and --notes-file are mutually exclusive", err=True)
        exit_with_code(ErrorCode.USER_ERROR)
    if notes_file is None:
        return notes or ""
    try:
        return notes_file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"error: cannot read notes file: {e}", err=True)
        exit_with_code(ErrorCode.USER_ERROR)


def _tag_exit_code(result: TagReleaseResult) -> ErrorCode:
    return ErrorCode.OK if result.succeeded else ErrorCode.GIT_ERROR


def _smart_exit_code(result: SmartReleaseResult) -> ErrorCode:
    if result.status == "success":
        return ErrorCode.OK
    if result.status == "partial":
        return ErrorCode.PARTIAL
    if result.error is not None:
        return release_error_code(result.error.kind)
    return ErrorCode.USER_ERROR


def release(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Target version, e.g. v1.2.0 or 1.3.0-rc.1"),
    force: bool = typer.Option(False, "--force", help="Allow duplicate or lower versions."),
    ref: str = typer.Option("HEAD", "--ref", help="Commit to tag (default: HEAD)."),
    push: bool | None = typer.Option(
        None, "--push/--no-push", help="Push tags to the remote (default from config)."
    ),
    github: bool | None = typer.Option(
        None,
        "--github/--no-github",
        help="Draft and publish a GitHub Release around the tags (default from config).",
    ),
    title: str | None = typer.Option(None, "--title", help="Release title."),
    notes: str | None = typer.Option(None, "--notes", help="Release notes."),
    notes_file: Path | None = typer.Option(None, "--notes-file", help="Read notes from a file."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Create the release tag and update latest / vMAJOR / vMAJOR.MINOR."""
    # JSON goes to stdout; progress moves to stderr so the two never interleave.
    console = RichConsole(stderr=True) if as_json else None
    cli = build_context(global_options(ctx), console=console)
    options = ReleaseOptions.from_config(cli.config, force=force, push=push, target_ref=ref)
    use_github = cli.config.github.enabled if github is None else github

    if not use_github:
        result = create_release(version, repo=cli.repo, console=cli.console, options=options)
        if isinstance(result, Err):
            exit_release_error(result.error, cli.console)
        if as_json:
            typer.echo(json.dumps(result.value.to_dict(), indent=2))
        else:
            render_tag_result(cli.console, result.value)
        exit_with_code(_tag_exit_code(result.value))

    body = _read_notes(notes, notes_file)
    gh_ok = ensure_gh_available()
    if isinstance(gh_ok, Err):
        exit_release_error(gh_ok.error, cli.console)
    auth_ok = ensure_gh_auth(workspace_root=cli.repo.path)
    if isinstance(auth_ok, Err):
        exit_release_error(auth_ok.error, cli.console)

    host = GhReleaseHost(workspace_root=cli.repo.path, repo_slug=cli.config.github.repo)
    release_title = title
    if release_title is None:
        release_title = cli.config.github.title.format(tag=normalize_tag(version))

    smart = create_smart_release(
        version,
        repo=cli.repo,
        host=host,
        console=cli.console,
        options=options,
        title=release_title,
        notes=body,
    )
    if as_json:
        typer.echo(json.dumps(smart.to_dict(), indent=2))
    else:
        render_smart_result(cli.console, smart)
    exit_with_code(_smart_exit_code(smart))
