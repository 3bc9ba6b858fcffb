"""Git tag backend.

GitRepository implements VersionControlBackend by running git against one
checkout. All operations return Result types.

Usage:
    repo = GitRepository(Path("/path/to/repo"))

    match repo.list_tags():
        case Ok(tags):
            print(f"{len(tags)} tags")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from smarttag.core.result import Err, Ok, Result
from smarttag.platform.process import ProcessError
from smarttag.platform.process import run as run_process
from smarttag.release.ports import GitError

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = ["GitRepository"]


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )


class GitRepository:
    """Tag operations on a local git checkout.

    Attributes:
        path: Path to the repository root
        remote: Remote that tags are pushed to
    """

    def __init__(self, path: Path, *, remote: str = "origin") -> None:
        self.path = path
        self.remote = remote

    @classmethod
    def discover(cls, start: Path, *, remote: str = "origin") -> Result[GitRepository, GitError]:
        """Find the repository containing start."""
        result = run_process(
            ["git", "-C", str(start), "rev-parse", "--show-toplevel"],
            cwd=start,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(_git_error("rev-parse", result.error, f"not a git repository: {start}"))
        return Ok(cls(Path(result.value.strip()), remote=remote))

    def has_commits(self) -> Result[None, GitError]:
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
        if isinstance(result, Err):
            return Err(
                GitError(
                    command="rev-parse",
                    message=f"repository has no commits (or is not a git repository): {self.path}",
                    returncode=result.error.returncode,
                )
            )
        return Ok(None)

    def list_tags(self) -> Result[list[str], GitError]:
        result = self._run(["tag", "--list"])
        if isinstance(result, Err):
            return Err(_git_error("tag --list", result.error, "failed to list tags"))
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def create_tag(
        self,
        name: str,
        target_ref: str,
        *,
        message: str | None = None,
        force: bool = False,
    ) -> Result[None, GitError]:
        args = ["tag"]
        if force:
            args.append("--force")
        if message is not None:
            args.extend(["--annotate", "--message", message])
        args.extend([name, target_ref])

        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error("tag", result.error, f"failed to create tag: {name}"))
        return Ok(None)

    def push_tags(
        self,
        names: Sequence[str] | None = None,
        *,
        force: bool = False,
    ) -> Result[None, GitError]:
        args = ["push"]
        if force:
            args.append("--force")
        args.append(self.remote)
        if names is None:
            args.append("--tags")
        else:
            if not names:
                return Ok(None)
            args.extend(f"refs/tags/{n}:refs/tags/{n}" for n in names)

        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error("push", result.error, "failed to push tags"))
        return Ok(None)

    def get_tag_commit(self, name: str) -> Result[str, GitError]:
        result = self._run(["rev-parse", "--verify", "--quiet", f"refs/tags/{name}^{{commit}}"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                # --quiet: a missing ref exits 1 with nothing on stderr
                if e.returncode == 1 and not e.stderr.strip():
                    return Err(
                        GitError(
                            command="rev-parse",
                            message=f"tag not found: {name}",
                            returncode=1,
                            kind="not_found",
                        )
                    )
                return Err(_git_error("rev-parse", e, f"failed to resolve tag: {name}"))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
