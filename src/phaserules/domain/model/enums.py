"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ConditionStatus(StrEnum):
    """Three-state observation domain for a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class MatchMode(StrEnum):
    """How a matcher group combines its children."""

    ALL = "all"
    ANY = "any"
