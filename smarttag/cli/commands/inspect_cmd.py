from __future__ import annotations

import typer

from smarttag.cli.commands._helpers import exit_release_error, exit_with_code
from smarttag.cli.context import build_context, global_options
from smarttag.cli.render import render_inventory, render_plan
from smarttag.core.errors import ErrorCode
from smarttag.core.result import Err
from smarttag.output.console import Style
from smarttag.release.model import ReleaseOptions
from smarttag.release.orchestrator import prepare_release
from smarttag.release.tags import classify_tags
from smarttag.release.validation import validate_target
from smarttag.release.version import parse_release_target


def tags(ctx: typer.Context) -> None:
    """List repository tags by kind (release, pre-release, moving, other)."""
    cli = build_context(global_options(ctx))

    names = cli.repo.list_tags()
    if isinstance(names, Err):
        cli.console.error(names.error.message)
        exit_with_code(ErrorCode.GIT_ERROR)

    render_inventory(cli.console, classify_tags(names.value))


def validate(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Target version, e.g. v1.2.0 or 1.3.0-rc.1"),
    force: bool = typer.Option(
        False, "--force", help="Downgrade duplicate/regression to warnings."
    ),
) -> None:
    """Check a target version against the existing tags."""
    cli = build_context(global_options(ctx))

    parsed = parse_release_target(version)
    if isinstance(parsed, Err):
        cli.console.error(parsed.error.message)
        exit_with_code(ErrorCode.USER_ERROR)

    names = cli.repo.list_tags()
    if isinstance(names, Err):
        cli.console.error(names.error.message)
        exit_with_code(ErrorCode.GIT_ERROR)

    result = validate_target(
        parsed.value,
        classify_tags(names.value).records,
        allow_force=force,
        max_major_jump=cli.config.validation.max_major_jump,
        max_minor_jump=cli.config.validation.max_minor_jump,
    )
    for warning in result.warnings:
        cli.console.warning(warning)

    if not result.is_valid:
        cli.console.error(result.message or "invalid target")
        cli.console.print(f"kind: {result.error_kind}", Style.DIM)
        exit_with_code(ErrorCode.VALIDATION_ERROR)

    cli.console.success(f"{parsed.value.to_tag()} is a valid release target")


def plan(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Target version, e.g. v1.2.0"),
    force: bool = typer.Option(False, "--force", help="Plan even for duplicates/regressions."),
    ref: str = typer.Option("HEAD", "--ref", help="Commit the release tag would point at."),
) -> None:
    """Preview the tag mutations a release would perform (writes nothing)."""
    cli = build_context(global_options(ctx))
    options = ReleaseOptions.from_config(cli.config, force=force, target_ref=ref)

    prepared = prepare_release(version, repo=cli.repo, options=options)
    if isinstance(prepared, Err):
        exit_release_error(prepared.error, cli.console)

    render_plan(cli.console, prepared.value, target_ref=ref)
