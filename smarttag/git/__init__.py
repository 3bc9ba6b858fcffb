"""Git backend for tag operations.

Usage:
    from smarttag.git import GitRepository

    repo = GitRepository(Path("/path/to/repo"))
    tags = repo.list_tags()
"""

from smarttag.git.repository import GitRepository
from smarttag.release.ports import GitError

__all__ = ["GitError", "GitRepository"]
