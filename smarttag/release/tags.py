"""Classification of repository tag names.

Three disjoint kinds of names matter here:
- release tags: exact versions, parsed into TagRecord
- moving tags: ``latest`` plus the smart tags ``vMAJOR`` and ``vMAJOR.MINOR``
- everything else, which is ignored
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from smarttag.core.result import Ok
from smarttag.release.version import SemanticVersion, parse_version

__all__ = [
    "LATEST_TAG",
    "SmartTagName",
    "TagInventory",
    "TagRecord",
    "classify_tags",
    "collect_tag_records",
    "implied_moving_tags",
    "is_moving_tag",
    "is_smart_tag",
    "parse_smart_tag",
]

LATEST_TAG = "latest"

_SMART_RE = re.compile(r"v(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?")


@dataclass(frozen=True, slots=True)
class TagRecord:
    """An exact-version tag found in the repository."""

    name: str
    version: SemanticVersion

    @property
    def is_prerelease(self) -> bool:
        return self.version.is_prerelease


@dataclass(frozen=True, slots=True)
class SmartTagName:
    """A parsed ``vMAJOR`` (minor is None) or ``vMAJOR.MINOR`` tag name."""

    major: int
    minor: int | None = None

    @property
    def name(self) -> str:
        if self.minor is None:
            return f"v{self.major}"
        return f"v{self.major}.{self.minor}"

    @classmethod
    def for_major(cls, version: SemanticVersion) -> SmartTagName:
        return cls(version.major)

    @classmethod
    def for_minor(cls, version: SemanticVersion) -> SmartTagName:
        return cls(version.major, version.minor)


def parse_smart_tag(name: str) -> SmartTagName | None:
    """Parse a smart tag name; exact-version tags never match."""
    m = _SMART_RE.fullmatch(name)
    if m is None:
        return None
    minor = m.group(2)
    return SmartTagName(int(m.group(1)), int(minor) if minor is not None else None)


def is_smart_tag(name: str) -> bool:
    return parse_smart_tag(name) is not None


def is_moving_tag(name: str) -> bool:
    return name == LATEST_TAG or is_smart_tag(name)


def collect_tag_records(names: Iterable[str]) -> list[TagRecord]:
    """Parse exact-version tags, highest precedence first.

    Names that do not parse are skipped. When several names map to the same
    version (``v1.2.3`` and ``1.2.3``) the first one seen is kept.
    """
    records: dict[SemanticVersion, TagRecord] = {}
    for name in names:
        parsed = parse_version(name)
        if not isinstance(parsed, Ok):
            continue
        records.setdefault(parsed.value, TagRecord(name=name, version=parsed.value))
    return sorted(records.values(), key=lambda r: r.version, reverse=True)


def implied_moving_tags(records: Iterable[TagRecord]) -> frozenset[str]:
    """Smart tag names a history of releases would have produced.

    Used when the real tag list is not available (e.g. planning from
    versions alone). Pre-releases never place smart tags.
    """
    names: set[str] = set()
    for record in records:
        if record.is_prerelease:
            continue
        names.add(SmartTagName.for_major(record.version).name)
        names.add(SmartTagName.for_minor(record.version).name)
    return frozenset(names)


@dataclass(frozen=True, slots=True)
class TagInventory:
    """All repository tags, bucketed by kind."""

    releases: tuple[TagRecord, ...]
    prereleases: tuple[TagRecord, ...]
    moving: tuple[str, ...]
    other: tuple[str, ...]

    @property
    def records(self) -> tuple[TagRecord, ...]:
        """Releases and pre-releases together, highest first."""
        merged = (*self.releases, *self.prereleases)
        return tuple(sorted(merged, key=lambda r: r.version, reverse=True))

    @property
    def latest_release(self) -> TagRecord | None:
        return self.releases[0] if self.releases else None


def classify_tags(names: Iterable[str]) -> TagInventory:
    names = list(names)
    records = collect_tag_records(names)
    record_names = {r.name for r in records}

    moving: list[str] = []
    other: list[str] = []
    for name in names:
        if name in record_names:
            continue
        if is_moving_tag(name):
            moving.append(name)
        else:
            other.append(name)

    return TagInventory(
        releases=tuple(r for r in records if not r.is_prerelease),
        prereleases=tuple(r for r in records if r.is_prerelease),
        moving=tuple(sorted(moving)),
        other=tuple(sorted(other)),
    )
