"""Semver release tagging with moving latest/vMAJOR/vMAJOR.MINOR tags."""

__version__ = "0.1.0"
