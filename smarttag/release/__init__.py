"""Release domain and orchestration.

- version: semantic version parsing and precedence
- tags: classification of repository tag names
- strategy: which moving tags to create, move or freeze
- validation: duplicate/regression checks on a release target
- orchestrator: applies a plan to git and a release host
- ports / gh: external system interfaces and the gh adapter
"""

from __future__ import annotations

from smarttag.release.model import ReleaseOptions, SmartReleaseResult, TagReleaseResult
from smarttag.release.orchestrator import (
    apply_release,
    create_release,
    create_smart_release,
    prepare_release,
)
from smarttag.release.strategy import StrategyPlan, compute_strategy
from smarttag.release.version import SemanticVersion, compare, parse_version

__all__ = [
    "ReleaseOptions",
    "SemanticVersion",
    "SmartReleaseResult",
    "StrategyPlan",
    "TagReleaseResult",
    "apply_release",
    "compare",
    "compute_strategy",
    "create_release",
    "create_smart_release",
    "parse_version",
    "prepare_release",
]
