from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_version",
    "invalid_template",
    "not_a_repository",
    "list_tags_failed",
    "duplicate_version",
    "version_regression",
    "gh_missing",
    "gh_auth_required",
    "host_failed",
    "tag_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Reason a release was rejected before or while running."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "message": self.message, "hint": self.hint}
