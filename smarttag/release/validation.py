"""Validation of a release target against the existing tag history."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from smarttag.core.config import DEFAULT_MAX_MAJOR_JUMP, DEFAULT_MAX_MINOR_JUMP
from smarttag.release.tags import TagRecord
from smarttag.release.version import SemanticVersion

__all__ = ["ValidationErrorKind", "ValidationResult", "validate_target"]


class ValidationErrorKind(Enum):
    DUPLICATE_VERSION = "duplicate_version"
    VERSION_REGRESSION = "version_regression"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    error_kind: ValidationErrorKind | None = None
    message: str | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def ok(cls, warnings: list[str]) -> ValidationResult:
        return cls(is_valid=True, warnings=tuple(warnings))

    @classmethod
    def fail(
        cls, kind: ValidationErrorKind, message: str, warnings: list[str]
    ) -> ValidationResult:
        return cls(is_valid=False, error_kind=kind, message=message, warnings=tuple(warnings))


def _jump_warnings(
    target: SemanticVersion,
    latest: SemanticVersion,
    *,
    max_major_jump: int,
    max_minor_jump: int,
) -> list[str]:
    out: list[str] = []
    major_jump = target.major - latest.major
    if major_jump > max_major_jump:
        out.append(
            f"major version jumps by {major_jump} "
            f"({latest.to_tag()} -> {target.to_tag()}); verify this is intentional"
        )
    if target.major == latest.major:
        minor_jump = target.minor - latest.minor
        if minor_jump > max_minor_jump:
            out.append(
                f"minor version jumps by {minor_jump} "
                f"({latest.to_tag()} -> {target.to_tag()}); verify this is intentional"
            )
    return out


def validate_target(
    target: SemanticVersion,
    existing: Sequence[TagRecord],
    *,
    allow_force: bool,
    max_major_jump: int = DEFAULT_MAX_MAJOR_JUMP,
    max_minor_jump: int = DEFAULT_MAX_MINOR_JUMP,
) -> ValidationResult:
    """Check that target is new and moves the history forward.

    Duplicates and regressions fail unless allow_force is set, in which case
    they come back as warnings. Large version jumps only ever warn.
    """
    tag = target.to_tag()
    warnings: list[str] = []

    if not existing:
        return ValidationResult.ok(warnings)

    latest = max(existing, key=lambda r: r.version).version
    warnings.extend(
        _jump_warnings(
            target,
            latest,
            max_major_jump=max_major_jump,
            max_minor_jump=max_minor_jump,
        )
    )

    if any(r.version == target for r in existing):
        if not allow_force:
            return ValidationResult.fail(
                ValidationErrorKind.DUPLICATE_VERSION,
                f"version already exists: {tag}",
                warnings,
            )
        warnings.append(f"version {tag} already exists; forcing re-release")
        return ValidationResult.ok(warnings)

    if target <= latest:
        if not allow_force:
            return ValidationResult.fail(
                ValidationErrorKind.VERSION_REGRESSION,
                f"version {tag} must be greater than latest ({latest.to_tag()})",
                warnings,
            )
        warnings.append(f"version {tag} is not greater than latest ({latest.to_tag()}); forcing")

    return ValidationResult.ok(warnings)
