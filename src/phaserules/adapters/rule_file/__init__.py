"""Static phase rule files (TOML)."""

from __future__ import annotations

from .schema import MatcherSpec, RuleDocument, RuleSpec
from .translator import (
    RuleConfigurationError,
    build_matcher,
    build_rules,
    load_rules,
    parse_rules,
)

__all__ = [
    "MatcherSpec",
    "RuleConfigurationError",
    "RuleDocument",
    "RuleSpec",
    "build_matcher",
    "build_rules",
    "load_rules",
    "parse_rules",
]
