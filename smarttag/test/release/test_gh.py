from __future__ import annotations

from pathlib import Path

import pytest

from smarttag.core.result import Err, Ok, Result
from smarttag.platform.process import ProcessError
from smarttag.release import gh as gh_mod
from smarttag.release.gh import GhReleaseHost, ensure_gh_auth, ensure_gh_available


def _err(*, stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "release"),
            returncode=returncode,
            stdout="",
            stderr=stderr,
        )
    )


class _Recorder:
    def __init__(self, *responses: Result[str, ProcessError]) -> None:
        self.responses = list(responses)
        self.calls: list[list[str]] = []

    def __call__(
        self, cmd: list[str], *, cwd: Path, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del cwd
        assert timeout == gh_mod.GH_TIMEOUT_SECONDS
        self.calls.append(cmd)
        return self.responses.pop(0)


def test_create_draft_with_notes(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok("https://github.com/acme/tool/releases/tag/untagged-1\n"))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    host = GhReleaseHost(workspace_root=tmp_path)
    result = host.create_draft_release("v1.2.0", "Release v1.2.0", "Fixes", prerelease=False)

    assert result == Ok(
        gh_mod.HostedRelease(
            release_id="v1.2.0", url="https://github.com/acme/tool/releases/tag/untagged-1"
        )
    )
    assert rec.calls == [
        [
            "gh",
            "release",
            "create",
            "v1.2.0",
            "--draft",
            "--title",
            "Release v1.2.0",
            "--notes",
            "Fixes",
        ]
    ]


def test_create_draft_prerelease_generates_notes(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    rec = _Recorder(Ok(""))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    host = GhReleaseHost(workspace_root=tmp_path, repo_slug="acme/tool")
    result = host.create_draft_release("v1.3.0-rc.1", "RC", "  ", prerelease=True)

    assert isinstance(result, Ok)
    assert result.value.url == ""
    cmd = rec.calls[0]
    assert "--generate-notes" in cmd
    assert "--prerelease" in cmd
    assert cmd[-2:] == ["--repo", "acme/tool"]


def test_create_draft_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="HTTP 422: already_exists")))

    result = GhReleaseHost(workspace_root=tmp_path).create_draft_release(
        "v1.0.0", "t", "n", prerelease=False
    )
    assert isinstance(result, Err)
    assert result.error.operation == "create_draft"
    assert result.error.message == "HTTP 422: already_exists"


@pytest.mark.parametrize(("mark", "flag"), [(True, "--latest=true"), (False, "--latest=false")])
def test_publish(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, mark: bool, flag: str
) -> None:
    rec = _Recorder(Ok(""))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    result = GhReleaseHost(workspace_root=tmp_path).publish_release("v1.0.0", mark_as_latest=mark)

    assert result == Ok(None)
    assert rec.calls == [["gh", "release", "edit", "v1.0.0", "--draft=false", flag]]


def test_publish_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="HTTP 502")))

    result = GhReleaseHost(workspace_root=tmp_path).publish_release("v1.0.0", mark_as_latest=True)
    assert isinstance(result, Err)
    assert result.error.operation == "publish"


def test_delete_keeps_tag(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(""))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    assert GhReleaseHost(workspace_root=tmp_path).delete_release("v1.0.0") == Ok(None)
    assert rec.calls == [["gh", "release", "delete", "v1.0.0", "--yes"]]
    assert "--cleanup-tag" not in rec.calls[0]


def test_ensure_gh_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)
    result = ensure_gh_available()
    assert isinstance(result, Err)
    assert result.error.kind == "gh_missing"

    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: "/usr/bin/gh")
    assert ensure_gh_available() == Ok(None)


def test_ensure_gh_auth(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="not logged in")))
    result = ensure_gh_auth(workspace_root=tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "gh_auth_required"
    assert result.error.hint == "Run: gh auth login"
