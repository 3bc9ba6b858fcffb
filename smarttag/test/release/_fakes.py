"""In-memory VersionControlBackend and ReleaseHost for orchestration tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from smarttag.core.result import Err, Ok, Result
from smarttag.release.ports import GitError, HostedRelease, HostError


def _empty_tags() -> dict[str, str]:
    return {}


def _empty_calls() -> list[tuple[str, ...]]:
    return []


@dataclass
class FakeBackend:
    """Tags map name -> commit. Tags created on another tag resolve through it."""

    tags: dict[str, str] = field(default_factory=_empty_tags)
    path: Path = Path(".")
    commits: bool = True
    head: str = "c0ffee0"
    fail_create: set[str] = field(default_factory=set)
    fail_push: bool = False
    fail_list: bool = False
    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)
    pushed: list[str] = field(default_factory=list)

    @classmethod
    def with_tags(cls, *names: str, commit: str = "0ld0000") -> FakeBackend:
        return cls(tags={name: commit for name in names})

    def has_commits(self) -> Result[None, GitError]:
        if not self.commits:
            return Err(GitError(command="rev-parse", message="repository has no commits"))
        return Ok(None)

    def list_tags(self) -> Result[list[str], GitError]:
        if self.fail_list:
            return Err(GitError(command="tag --list", message="cannot list tags"))
        return Ok(sorted(self.tags))

    def create_tag(
        self,
        name: str,
        target_ref: str,
        *,
        message: str | None = None,
        force: bool = False,
    ) -> Result[None, GitError]:
        self.calls.append(("create_tag", name, target_ref, str(force)))
        if name in self.fail_create:
            return Err(GitError(command="tag", message=f"cannot create {name}"))
        if name in self.tags and not force:
            return Err(GitError(command="tag", message=f"tag '{name}' already exists"))
        if target_ref == "HEAD":
            self.tags[name] = self.head
        else:
            self.tags[name] = self.tags.get(target_ref, target_ref)
        return Ok(None)

    def push_tags(
        self,
        names: Sequence[str] | None = None,
        *,
        force: bool = False,
    ) -> Result[None, GitError]:
        pushed = list(self.tags) if names is None else list(names)
        self.calls.append(("push_tags", *pushed, str(force)))
        if self.fail_push:
            return Err(GitError(command="push", message="remote rejected"))
        self.pushed.extend(pushed)
        return Ok(None)

    def get_tag_commit(self, name: str) -> Result[str, GitError]:
        if name not in self.tags:
            return Err(
                GitError(command="rev-parse", message=f"tag not found: {name}", kind="not_found")
            )
        return Ok(self.tags[name])


@dataclass
class FakeReleaseHost:
    fail_draft: bool = False
    fail_publish: bool = False
    fail_delete: bool = False
    drafts: dict[str, bool] = field(default_factory=dict)  # id -> prerelease
    published: dict[str, bool] = field(default_factory=dict)  # id -> marked latest
    deleted: list[str] = field(default_factory=list)

    def create_draft_release(
        self,
        version: str,
        title: str,
        notes: str,
        *,
        prerelease: bool,
    ) -> Result[HostedRelease, HostError]:
        if self.fail_draft:
            return Err(HostError(operation="create_draft", message="HTTP 422"))
        self.drafts[version] = prerelease
        return Ok(HostedRelease(release_id=version, url=f"https://example.test/releases/{version}"))

    def publish_release(self, release_id: str, *, mark_as_latest: bool) -> Result[None, HostError]:
        if self.fail_publish:
            return Err(HostError(operation="publish", message="HTTP 502"))
        self.published[release_id] = mark_as_latest
        return Ok(None)

    def delete_release(self, release_id: str) -> Result[None, HostError]:
        if self.fail_delete:
            return Err(HostError(operation="delete", message="HTTP 404"))
        self.drafts.pop(release_id, None)
        self.deleted.append(release_id)
        return Ok(None)
