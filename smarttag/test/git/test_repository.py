"""Tests for git/repository.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from smarttag.core.result import Err, Ok, Result
from smarttag.git import repository as repo_mod
from smarttag.git.repository import GitRepository
from smarttag.platform.process import ProcessError


def _err(*, returncode: int = 1, stderr: str = "", stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=("git",), returncode=returncode, stdout=stdout, stderr=stderr))


class _FakeGit:
    def __init__(self, *responses: Result[str, ProcessError]) -> None:
        self.responses = list(responses)
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def __call__(
        self, cmd: list[str], *, cwd: Path, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del cwd
        self.calls.append(cmd)
        self.timeouts.append(timeout)
        return self.responses.pop(0)


@pytest.fixture
def repo(tmp_path: Path) -> GitRepository:
    return GitRepository(tmp_path, remote="upstream")


def _install(monkeypatch: pytest.MonkeyPatch, *responses: Result[str, ProcessError]) -> _FakeGit:
    fake = _FakeGit(*responses)
    monkeypatch.setattr(repo_mod, "run_process", fake)
    return fake


class TestDiscover:
    def test_found(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _install(monkeypatch, Ok(f"{tmp_path}\n"))
        result = GitRepository.discover(tmp_path / "src", remote="upstream")
        assert isinstance(result, Ok)
        assert result.value.path == tmp_path
        assert result.value.remote == "upstream"

    def test_not_a_repository(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _install(monkeypatch, _err(returncode=128, stderr="fatal: not a git repository"))
        result = GitRepository.discover(tmp_path)
        assert isinstance(result, Err)
        assert result.error.message == "fatal: not a git repository"
        assert result.error.returncode == 128


class TestReads:
    def test_has_commits(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok("abc\n"), _err(returncode=128))
        assert repo.has_commits() == Ok(None)

        result = repo.has_commits()
        assert isinstance(result, Err)
        assert "no commits" in result.error.message
        assert fake.calls[0][-1] == "HEAD^{commit}"

    def test_list_tags(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok("v1.0.0\nlatest\n\nv1\n"))
        assert repo.list_tags() == Ok(["v1.0.0", "latest", "v1"])
        assert fake.calls[0] == ["git", "-C", str(repo.path), "tag", "--list"]

    def test_get_tag_commit(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok("0123abc\n"))
        assert repo.get_tag_commit("v1") == Ok("0123abc")
        assert fake.calls[0][-1] == "refs/tags/v1^{commit}"

    def test_get_tag_commit_missing(
        self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository
    ) -> None:
        _install(monkeypatch, _err(returncode=1))
        result = repo.get_tag_commit("v9")
        assert isinstance(result, Err)
        assert result.error.kind == "not_found"

    def test_get_tag_commit_other_failure(
        self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository
    ) -> None:
        _install(monkeypatch, _err(returncode=128, stderr="fatal: bad object"))
        result = repo.get_tag_commit("v1")
        assert isinstance(result, Err)
        assert result.error.kind == "failed"
        assert result.error.message == "fatal: bad object"


class TestWrites:
    def test_annotated_tag(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok(""))
        assert repo.create_tag("v1.0.0", "HEAD", message="Release v1.0.0") == Ok(None)
        assert fake.calls[0][3:] == [
            "tag",
            "--annotate",
            "--message",
            "Release v1.0.0",
            "v1.0.0",
            "HEAD",
        ]

    def test_forced_lightweight_tag(
        self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository
    ) -> None:
        fake = _install(monkeypatch, Ok(""))
        assert repo.create_tag("v1", "v1.0.0", force=True) == Ok(None)
        assert fake.calls[0][3:] == ["tag", "--force", "v1", "v1.0.0"]

    def test_create_tag_failure(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        _install(monkeypatch, _err(returncode=128, stderr="fatal: tag 'v1.0.0' already exists"))
        result = repo.create_tag("v1.0.0", "HEAD")
        assert isinstance(result, Err)
        assert result.error.command == "tag"
        assert "already exists" in result.error.message

    def test_push_named_tags(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok(""))
        assert repo.push_tags(["latest", "v1"], force=True) == Ok(None)
        assert fake.calls[0][3:] == [
            "push",
            "--force",
            "upstream",
            "refs/tags/latest:refs/tags/latest",
            "refs/tags/v1:refs/tags/v1",
        ]
        assert fake.timeouts[0] == repo_mod._GIT_NETWORK_TIMEOUT_SECONDS

    def test_push_all_tags(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch, Ok(""))
        assert repo.push_tags() == Ok(None)
        assert fake.calls[0][3:] == ["push", "upstream", "--tags"]

    def test_push_nothing(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        fake = _install(monkeypatch)
        assert repo.push_tags([]) == Ok(None)
        assert fake.calls == []

    def test_push_failure(self, monkeypatch: pytest.MonkeyPatch, repo: GitRepository) -> None:
        _install(monkeypatch, _err(stderr="! [rejected] v1 (already exists)"))
        result = repo.push_tags(["v1"])
        assert isinstance(result, Err)
        assert result.error.command == "push"
