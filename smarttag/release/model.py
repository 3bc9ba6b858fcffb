from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from smarttag.core.config import (
    DEFAULT_MAX_MAJOR_JUMP,
    DEFAULT_MAX_MINOR_JUMP,
    DEFAULT_TAG_MESSAGE,
    Config,
)
from smarttag.release.errors import ReleaseError
from smarttag.release.ports import HostedRelease
from smarttag.release.strategy import CreateRelease, StrategyPlan, TagMutation
from smarttag.release.tags import TagRecord
from smarttag.release.validation import ValidationResult
from smarttag.release.version import SemanticVersion

TagStep = Literal["create_release", "move", "push"]
SmartStep = Literal["prepare", "draft", "tags", "publish"]
SmartStatus = Literal["success", "partial", "failed"]


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    force: bool = False
    push: bool = True
    target_ref: str = "HEAD"
    tag_message: str = DEFAULT_TAG_MESSAGE
    # Stable releases only; pre-releases are never marked latest.
    mark_latest: bool = True
    max_major_jump: int = DEFAULT_MAX_MAJOR_JUMP
    max_minor_jump: int = DEFAULT_MAX_MINOR_JUMP

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        force: bool = False,
        push: bool | None = None,
        target_ref: str = "HEAD",
    ) -> ReleaseOptions:
        return cls(
            force=force,
            push=config.git.push if push is None else push,
            target_ref=target_ref,
            tag_message=config.git.tag_message,
            mark_latest=config.github.mark_latest,
            max_major_jump=config.validation.max_major_jump,
            max_minor_jump=config.validation.max_minor_jump,
        )


@dataclass(frozen=True, slots=True)
class PreparedRelease:
    """Everything decided before the first tag is written.

    plan is None for pre-releases: they get their exact tag and nothing else.
    """

    version: SemanticVersion
    existing: tuple[TagRecord, ...]
    validation: ValidationResult
    plan: StrategyPlan | None

    @property
    def release_tag(self) -> str:
        return self.version.to_tag()

    @property
    def is_prerelease(self) -> bool:
        return self.version.is_prerelease

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.validation.warnings

    def mutations(self, *, target_ref: str = "HEAD") -> tuple[TagMutation, ...]:
        if self.plan is None:
            return (CreateRelease(name=self.release_tag, target_ref=target_ref),)
        return self.plan.mutations(target_ref=target_ref)


@dataclass(frozen=True, slots=True)
class MovedTag:
    name: str
    previous: str  # commit the tag resolved to before the move
    new: str  # release tag it points at now


@dataclass(frozen=True, slots=True)
class TagFailure:
    step: TagStep
    tag: str
    message: str


@dataclass(frozen=True, slots=True)
class TagReleaseResult:
    version: str
    created: tuple[str, ...] = ()
    moved: tuple[MovedTag, ...] = ()
    frozen: tuple[str, ...] = ()
    pushed: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    failure: TagFailure | None = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def touched(self) -> tuple[str, ...]:
        """Tags written locally by this run, in write order."""
        return (*self.created, *(m.name for m in self.moved))

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "succeeded": self.succeeded,
            "created": list(self.created),
            "moved": [{"name": m.name, "previous": m.previous, "new": m.new} for m in self.moved],
            "frozen": list(self.frozen),
            "pushed": list(self.pushed),
            "warnings": list(self.warnings),
            "failure": (
                None
                if self.failure is None
                else {
                    "step": self.failure.step,
                    "tag": self.failure.tag,
                    "message": self.failure.message,
                }
            ),
            "duration_seconds": round(self.duration_seconds, 3),
        }


@dataclass(frozen=True, slots=True)
class RollbackInfo:
    """What a human should look at after a partial failure.

    draft_deleted is None when no deletion was attempted.
    """

    draft_deleted: bool | None = None
    draft_delete_error: str | None = None
    tags_to_inspect: tuple[str, ...] = ()
    release_to_inspect: str | None = None

    @property
    def needs_attention(self) -> bool:
        return bool(self.tags_to_inspect) or self.release_to_inspect is not None

    def to_dict(self) -> dict[str, object]:
        return {
            "draft_deleted": self.draft_deleted,
            "draft_delete_error": self.draft_delete_error,
            "tags_to_inspect": list(self.tags_to_inspect),
            "release_to_inspect": self.release_to_inspect,
        }


@dataclass(frozen=True, slots=True)
class SmartReleaseResult:
    version: str
    status: SmartStatus
    draft_created: bool = False
    tags_applied: bool = False
    published: bool = False
    release: HostedRelease | None = None
    tags: TagReleaseResult | None = None
    failed_step: SmartStep | None = None
    error: ReleaseError | None = None
    rollback: RollbackInfo = field(default_factory=RollbackInfo)
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "status": self.status,
            "steps": {
                "draft": self.draft_created,
                "tags": self.tags_applied,
                "publish": self.published,
            },
            "release": (
                None
                if self.release is None
                else {"id": self.release.release_id, "url": self.release.url}
            ),
            "tags": None if self.tags is None else self.tags.to_dict(),
            "failed_step": self.failed_step,
            "error": None if self.error is None else self.error.to_dict(),
            "rollback": self.rollback.to_dict(),
            "duration_seconds": round(self.duration_seconds, 3),
        }
