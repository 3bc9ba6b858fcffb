"""Interfaces of the external systems a release drives.

The orchestrator only sees these Protocols. ``GitRepository`` and
``GhReleaseHost`` implement them by shelling out to git and gh; tests use
in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

from smarttag.core.result import Result

__all__ = [
    "GitError",
    "HostError",
    "HostedRelease",
    "ReleaseHost",
    "VersionControlBackend",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "tag", "push")
        message: Error message
        returncode: Process return code
        kind: "not_found" when the ref does not exist, else "failed"
    """

    command: str
    message: str
    returncode: int = 1
    kind: Literal["failed", "not_found"] = "failed"


@dataclass(frozen=True, slots=True)
class HostError:
    """Error from the release host."""

    operation: Literal["create_draft", "publish", "delete"]
    message: str


@dataclass(frozen=True, slots=True)
class HostedRelease:
    release_id: str
    url: str


class VersionControlBackend(Protocol):
    """Tag operations on one repository."""

    def has_commits(self) -> Result[None, GitError]:
        """Ok when the path is an initialized repository with at least one commit."""
        ...

    def list_tags(self) -> Result[list[str], GitError]: ...

    def create_tag(
        self,
        name: str,
        target_ref: str,
        *,
        message: str | None = None,
        force: bool = False,
    ) -> Result[None, GitError]:
        """Create (or with force, overwrite) a tag. A message makes it annotated."""
        ...

    def push_tags(
        self,
        names: Sequence[str] | None = None,
        *,
        force: bool = False,
    ) -> Result[None, GitError]:
        """Push the named tags, or every local tag when names is None."""
        ...

    def get_tag_commit(self, name: str) -> Result[str, GitError]:
        """Commit a tag resolves to; Err(kind="not_found") if the tag is missing."""
        ...


class ReleaseHost(Protocol):
    """A hosted release service (GitHub Releases)."""

    def create_draft_release(
        self,
        version: str,
        title: str,
        notes: str,
        *,
        prerelease: bool,
    ) -> Result[HostedRelease, HostError]: ...

    def publish_release(
        self, release_id: str, *, mark_as_latest: bool
    ) -> Result[None, HostError]: ...

    def delete_release(self, release_id: str) -> Result[None, HostError]: ...
