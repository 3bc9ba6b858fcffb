"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from smarttag.core.errors import ErrorCode
from smarttag.output.console import ConsoleProtocol, Style
from smarttag.release.errors import ReleaseError


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"not_a_repository", "gh_missing", "gh_auth_required"}:
        return ErrorCode.ENV_ERROR
    if kind in {"duplicate_version", "version_regression"}:
        return ErrorCode.VALIDATION_ERROR
    if kind in {"list_tags_failed", "tag_failed"}:
        return ErrorCode.GIT_ERROR
    if kind in {"host_failed"}:
        return ErrorCode.HOST_ERROR
    return ErrorCode.USER_ERROR


def exit_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    """Print a ReleaseError and exit with the code for its kind."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error.kind)))


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))
