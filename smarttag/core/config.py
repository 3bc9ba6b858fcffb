"""Typed configuration loading and access.

Configuration lives either in a dedicated ``smarttag.toml`` at the repository
root or under ``[tool.smarttag]`` in ``pyproject.toml``. Missing keys fall
back to the defaults declared on the dataclasses below.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "GitHubConfig",
    "ValidationConfig",
    "CONFIG_FILENAME",
    "find_config",
    "load_config",
    "template_error",
]

CONFIG_FILENAME = "smarttag.toml"
PYPROJECT_FILENAME = "pyproject.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_TAG_MESSAGE = "Release {tag}"
DEFAULT_RELEASE_TITLE = "Release {tag}"
DEFAULT_MAX_MAJOR_JUMP = 1
DEFAULT_MAX_MINOR_JUMP = 5


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Tag creation and push settings."""

    remote: str = DEFAULT_REMOTE
    push: bool = True
    # Formatted with {tag}; used as the annotated release tag message.
    tag_message: str = DEFAULT_TAG_MESSAGE


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Hosted release settings (gh CLI)."""

    enabled: bool = False
    repo: str | None = None  # owner/name, None = let gh infer from the checkout
    title: str = DEFAULT_RELEASE_TITLE
    mark_latest: bool = True


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Thresholds for the non-blocking "verify intentional" warnings."""

    max_major_jump: int = DEFAULT_MAX_MAJOR_JUMP
    max_minor_jump: int = DEFAULT_MAX_MINOR_JUMP


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    git: GitConfig = field(default_factory=GitConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        git: StrDict = get_table(data, "git") or {}
        github: StrDict = get_table(data, "github") or {}
        validation: StrDict = get_table(data, "validation") or {}

        push = get_bool(git, "push")
        enabled = get_bool(github, "enabled")
        mark_latest = get_bool(github, "mark_latest")
        max_major = get_int(validation, "max_major_jump")
        max_minor = get_int(validation, "max_minor_jump")

        return cls(
            git=GitConfig(
                remote=get_str(git, "remote") or DEFAULT_REMOTE,
                push=True if push is None else push,
                tag_message=get_str(git, "tag_message") or DEFAULT_TAG_MESSAGE,
            ),
            github=GitHubConfig(
                enabled=False if enabled is None else enabled,
                repo=get_str(github, "repo"),
                title=get_str(github, "title") or DEFAULT_RELEASE_TITLE,
                mark_latest=True if mark_latest is None else mark_latest,
            ),
            validation=ValidationConfig(
                max_major_jump=DEFAULT_MAX_MAJOR_JUMP if max_major is None else max_major,
                max_minor_jump=DEFAULT_MAX_MINOR_JUMP if max_minor is None else max_minor,
            ),
        )


def template_error(template: str) -> str | None:
    """Why template cannot be formatted with only {tag}, or None if it can."""
    try:
        template.format(tag="v0.0.0")
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        return f"bad placeholder in {template!r}: {e!r}"
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    try:
        with path.open("rb") as f:
            raw: object = tomllib.load(f)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Cannot read {path}: {e.strerror or e}", path=path))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Invalid TOML in {path.name}: {e}", path=path))

    data = as_str_dict(raw)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def _config_table(path: Path, data: StrDict) -> StrDict:
    if path.name != PYPROJECT_FILENAME:
        return data
    tool = get_table(data, "tool") or {}
    return get_table(tool, "smarttag") or {}


def find_config(root: Path) -> Path | None:
    """Locate the config file for a repository root.

    ``smarttag.toml`` wins over ``pyproject.toml``; a pyproject without a
    ``[tool.smarttag]`` table is still returned and yields defaults.
    """
    for name in (CONFIG_FILENAME, PYPROJECT_FILENAME):
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load smarttag.toml, or the [tool.smarttag] table of a pyproject.toml.

    A pyproject without that table loads as the defaults. Templates that use
    anything besides {tag} are rejected here rather than at release time.
    """
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed
    config = Config.from_dict(_config_table(path, parsed.value))

    templates = {"git.tag_message": config.git.tag_message, "github.title": config.github.title}
    for key, template in templates.items():
        problem = template_error(template)
        if problem is not None:
            return Err(ConfigError(f"Invalid {key} in {path.name}: {problem}", path=path))
    return Ok(config)
