"""Semantic version model for release tags.

Tags in a repository are a mixed namespace: exact release tags (``v1.2.3``,
``v1.3.0-rc.1``), moving tags (``latest``, ``v1``, ``v1.2``) and anything else
people push. ``parse_version`` therefore reports malformed input as an ``Err``
value, which callers read as "not a version tag".
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Literal

from smarttag.core.result import Err, Ok, Result

__all__ = [
    "PRERELEASE_LABELS",
    "Ordering",
    "PrereleaseLabel",
    "SemanticVersion",
    "VersionParseError",
    "compare",
    "is_valid_format",
    "normalize_tag",
    "parse_release_target",
    "parse_version",
]

PrereleaseLabel = Literal["alpha", "beta", "rc"]

# Stability order: alpha < beta < rc.
PRERELEASE_LABELS: tuple[PrereleaseLabel, ...] = ("alpha", "beta", "rc")
_LABEL_RANK: dict[str, int] = {label: i for i, label in enumerate(PRERELEASE_LABELS)}

_VERSION_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<label>alpha|beta|rc)(?:\.(?P<number>0|[1-9]\d*))?)?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, slots=True)
class VersionParseError:
    """A string that is not a semantic version tag."""

    text: str
    message: str


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """An immutable parsed version.

    Build metadata is carried for display only: it is excluded from equality,
    hashing and ordering.
    """

    major: int
    minor: int
    patch: int
    prerelease_label: PrereleaseLabel | None = None
    prerelease_number: int | None = None
    build_metadata: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"negative version component: {self.major}.{self.minor}.{self.patch}")
        if self.prerelease_label is not None and self.prerelease_label not in _LABEL_RANK:
            raise ValueError(f"unknown pre-release label: {self.prerelease_label}")
        if self.prerelease_label is None and self.prerelease_number is not None:
            raise ValueError("pre-release number without a label")

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease_label is not None

    @property
    def core(self) -> SemanticVersion:
        """The release version this one is (or will become)."""
        return SemanticVersion(self.major, self.minor, self.patch)

    def to_string(self, *, prefix: bool = True, build: bool = True) -> str:
        out = f"{'v' if prefix else ''}{self.major}.{self.minor}.{self.patch}"
        if self.prerelease_label is not None:
            out += f"-{self.prerelease_label}"
            if self.prerelease_number is not None:
                out += f".{self.prerelease_number}"
        if build and self.build_metadata:
            out += f"+{self.build_metadata}"
        return out

    def to_tag(self) -> str:
        """Canonical tag name, ``v`` prefixed, without build metadata."""
        return self.to_string(prefix=True, build=False)

    def _key(self) -> tuple[int, int, int, int, int, int]:
        if self.prerelease_label is None:
            return (self.major, self.minor, self.patch, 1, 0, 0)
        number = -1 if self.prerelease_number is None else self.prerelease_number
        return (self.major, self.minor, self.patch, 0, _LABEL_RANK[self.prerelease_label], number)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        return self.to_string()


def compare(a: SemanticVersion, b: SemanticVersion) -> Ordering:
    """Three-way comparison by semver precedence."""
    ka = a._key()
    kb = b._key()
    if ka < kb:
        return Ordering.LESS
    if ka > kb:
        return Ordering.GREATER
    return Ordering.EQUAL


def parse_version(text: str) -> Result[SemanticVersion, VersionParseError]:
    """Parse ``[v]MAJOR.MINOR.PATCH[-alpha|beta|rc[.N]][+build]``."""
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        reason = "empty version string" if not text else "expected [v]MAJOR.MINOR.PATCH[-label[.N]]"
        return Err(VersionParseError(text=text, message=reason))

    number = m.group("number")
    return Ok(
        SemanticVersion(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch")),
            prerelease_label=m.group("label"),
            prerelease_number=int(number) if number is not None else None,
            build_metadata=m.group("build"),
        )
    )


def is_valid_format(
    text: str,
    *,
    allow_v_prefix: bool = True,
    allow_prerelease: bool = True,
) -> bool:
    if not allow_v_prefix and text.startswith("v"):
        return False
    parsed = parse_version(text)
    if isinstance(parsed, Err):
        return False
    return allow_prerelease or not parsed.value.is_prerelease


def normalize_tag(text: str) -> str:
    """Strip whitespace and ensure a single leading ``v``."""
    s = text.strip()
    if s.startswith("v"):
        return s
    return f"v{s}"


def parse_release_target(text: str) -> Result[SemanticVersion, VersionParseError]:
    """Parse a version this tool is asked to tag.

    Stricter than ``parse_version``: the normalized tag must carry the ``v``
    prefix and no build metadata, since two tags differing only in metadata
    would have equal precedence.
    """
    tag = normalize_tag(text)
    parsed = parse_version(tag)
    if isinstance(parsed, Err):
        return Err(
            VersionParseError(
                text=text,
                message=f"invalid release version: {text.strip() or '<empty>'}",
            )
        )
    if parsed.value.build_metadata is not None:
        return Err(
            VersionParseError(
                text=text,
                message=f"build metadata is not allowed in release tags: {text.strip()}",
            )
        )
    return parsed
