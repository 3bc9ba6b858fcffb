"""Smart tag strategy engine.

Given a target release and the tags already in the repository, decide which
moving tags get created, which get moved, and which stop moving. The engine
is pure: it never talks to git, and it is only ever asked about final
releases (pre-releases leave every moving tag where it is).

The decision is a three-way branch on what changed relative to the highest
existing release:

    major  v1.3.4 -> v2.0.0   freeze v1 and v1.*, create v2 (v2.0 only if needed)
    minor  v1.0.5 -> v1.1.0   move v1, freeze v1.0, create v1.1
    patch  v1.0.0 -> v1.0.1   move v1 and v1.0

``latest`` moves on every release. A ``vMAJOR.MINOR`` tag is skipped when a
new major line starts at exactly ``.0.0``; ``vMAJOR`` alone already points
there.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Literal

from smarttag.release.tags import (
    LATEST_TAG,
    SmartTagName,
    TagRecord,
    implied_moving_tags,
    parse_smart_tag,
)
from smarttag.release.version import SemanticVersion

__all__ = [
    "BumpKind",
    "CreateRelease",
    "FreezeStatic",
    "MoveSmart",
    "StrategyPlan",
    "TagMutation",
    "compute_strategy",
]

BumpKind = Literal["initial", "major", "minor", "patch"]


@dataclass(frozen=True, slots=True)
class CreateRelease:
    """Create the exact-version tag itself."""

    name: str
    target_ref: str


@dataclass(frozen=True, slots=True)
class MoveSmart:
    """Point a moving tag at the release tag of target_version."""

    name: str
    target_version: SemanticVersion

    @property
    def target_ref(self) -> str:
        # Always the release tag, never a commit: smart tag -> release tag -> commit.
        return self.target_version.to_tag()


@dataclass(frozen=True, slots=True)
class FreezeStatic:
    """A moving tag that stays where it is from now on.

    Nothing is written to the repository for a freeze; the entry exists so
    the plan and the result can report it.
    """

    name: str


TagMutation = CreateRelease | MoveSmart | FreezeStatic


@dataclass(frozen=True, slots=True)
class StrategyPlan:
    target: SemanticVersion
    bump: BumpKind
    baseline: TagRecord | None
    smart_tags_to_create: tuple[MoveSmart, ...]
    moving_tags_to_update: tuple[MoveSmart, ...]
    tags_to_freeze: tuple[FreezeStatic, ...]

    @property
    def release_tag(self) -> str:
        return self.target.to_tag()

    @property
    def smart_moves(self) -> tuple[MoveSmart, ...]:
        """Every tag the plan writes after the release tag, in apply order."""
        return (*self.smart_tags_to_create, *self.moving_tags_to_update)

    def mutations(self, *, target_ref: str = "HEAD") -> tuple[TagMutation, ...]:
        """Flatten the plan: release tag, smart creates, moves, then freezes."""
        return (
            CreateRelease(name=self.release_tag, target_ref=target_ref),
            *self.smart_tags_to_create,
            *self.moving_tags_to_update,
            *self.tags_to_freeze,
        )


def _latest_release(existing: Sequence[TagRecord]) -> TagRecord | None:
    releases = [r for r in existing if not r.is_prerelease]
    if not releases:
        return None
    return max(releases, key=lambda r: r.version)


def _needs_minor_tag(target: SemanticVersion) -> bool:
    return target.minor > 0 or target.patch > 0


def _freeze_major_line(major: int, moving: Collection[str]) -> tuple[FreezeStatic, ...]:
    line: list[SmartTagName] = []
    for name in moving:
        smart = parse_smart_tag(name)
        if smart is not None and smart.major == major:
            line.append(smart)
    line.sort(key=lambda s: -1 if s.minor is None else s.minor)
    return tuple(FreezeStatic(s.name) for s in line)


def compute_strategy(
    target: SemanticVersion,
    existing: Sequence[TagRecord],
    *,
    moving_tags: Collection[str] | None = None,
) -> StrategyPlan:
    """Compute the tag mutation plan for releasing target.

    A first or major release creates ``vMAJOR`` and, unless minor and patch
    are both 0, ``vMAJOR.MINOR`` too. A first release of ``v1.0.1`` therefore
    creates ``v1`` and ``v1.0``, not ``v1`` alone.

    Args:
        target: The release being tagged. Must not be a pre-release.
        existing: Exact-version tags already in the repository.
        moving_tags: Moving tag names present in the repository. When None,
            they are inferred from the release history in existing.

    Raises:
        ValueError: If target is a pre-release.
    """
    if target.is_prerelease:
        raise ValueError(f"pre-release {target.to_tag()} does not move smart tags")

    moving = frozenset(moving_tags) if moving_tags is not None else implied_moving_tags(existing)

    major_tag = MoveSmart(SmartTagName.for_major(target).name, target)
    minor_tag = MoveSmart(SmartTagName.for_minor(target).name, target)
    latest = MoveSmart(LATEST_TAG, target)

    baseline = _latest_release(existing)

    if baseline is None:
        create = (major_tag, minor_tag) if _needs_minor_tag(target) else (major_tag,)
        return StrategyPlan(
            target=target,
            bump="initial",
            baseline=None,
            smart_tags_to_create=create,
            moving_tags_to_update=(latest,),
            tags_to_freeze=(),
        )

    prev = baseline.version

    if target.major != prev.major:
        create = (major_tag, minor_tag) if _needs_minor_tag(target) else (major_tag,)
        return StrategyPlan(
            target=target,
            bump="major",
            baseline=baseline,
            smart_tags_to_create=create,
            moving_tags_to_update=(latest,),
            tags_to_freeze=_freeze_major_line(prev.major, moving),
        )

    if target.minor != prev.minor:
        old_minor = SmartTagName(prev.major, prev.minor).name
        freeze = (FreezeStatic(old_minor),) if old_minor in moving else ()
        return StrategyPlan(
            target=target,
            bump="minor",
            baseline=baseline,
            smart_tags_to_create=(minor_tag,),
            moving_tags_to_update=(latest, major_tag),
            tags_to_freeze=freeze,
        )

    return StrategyPlan(
        target=target,
        bump="patch",
        baseline=baseline,
        smart_tags_to_create=(),
        moving_tags_to_update=(latest, major_tag, minor_tag),
        tags_to_freeze=(),
    )
