from __future__ import annotations

import shutil
from pathlib import Path

from smarttag.core.result import Err, Ok, Result
from smarttag.platform.process import ProcessError
from smarttag.platform.process import run as run_process
from smarttag.release.errors import ReleaseError
from smarttag.release.ports import HostError, HostedRelease

GH_TIMEOUT_SECONDS = 60.0


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, workspace_root: Path) -> Result[None, ReleaseError]:
    result = run_process(["gh", "auth", "status"], cwd=workspace_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login",
            )
        )
    return Ok(None)


class GhReleaseHost:
    """ReleaseHost backed by ``gh release``.

    gh addresses releases (drafts included) by tag name, so the tag doubles
    as the release id.
    """

    def __init__(self, *, workspace_root: Path, repo_slug: str | None = None) -> None:
        self.workspace_root = workspace_root
        self.repo_slug = repo_slug

    def create_draft_release(
        self,
        version: str,
        title: str,
        notes: str,
        *,
        prerelease: bool,
    ) -> Result[HostedRelease, HostError]:
        cmd = ["gh", "release", "create", version, "--draft", "--title", title]
        if notes.strip():
            cmd.extend(["--notes", notes])
        else:
            cmd.append("--generate-notes")
        if prerelease:
            cmd.append("--prerelease")

        result = self._run(cmd)
        if isinstance(result, Err):
            return Err(
                HostError(
                    operation="create_draft",
                    message=result.error.detail,
                )
            )

        # gh prints the release URL as the last stdout line.
        lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
        url = lines[-1] if lines else ""
        return Ok(HostedRelease(release_id=version, url=url))

    def publish_release(self, release_id: str, *, mark_as_latest: bool) -> Result[None, HostError]:
        cmd = [
            "gh",
            "release",
            "edit",
            release_id,
            "--draft=false",
            f"--latest={'true' if mark_as_latest else 'false'}",
        ]
        result = self._run(cmd)
        if isinstance(result, Err):
            return Err(HostError(operation="publish", message=result.error.detail))
        return Ok(None)

    def delete_release(self, release_id: str) -> Result[None, HostError]:
        # Never --cleanup-tag: tags are owned by the git side of the release.
        cmd = ["gh", "release", "delete", release_id, "--yes"]
        result = self._run(cmd)
        if isinstance(result, Err):
            return Err(HostError(operation="delete", message=result.error.detail))
        return Ok(None)

    def _run(self, cmd: list[str]) -> Result[str, ProcessError]:
        if self.repo_slug is not None:
            cmd = [*cmd, "--repo", self.repo_slug]
        return run_process(cmd, cwd=self.workspace_root, timeout=GH_TIMEOUT_SECONDS)
