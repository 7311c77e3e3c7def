"""Condition matchers and phase rules."""

from __future__ import annotations

from .matchers import (
    ConditionEquals,
    ConditionGroup,
    Matcher,
    condition_equals,
    condition_types,
    conditions_all,
    conditions_any,
    matches,
)
from .phase_rule import PhaseRule, compute_phase, new_phase_rule

__all__ = [
    "ConditionEquals",
    "ConditionGroup",
    "Matcher",
    "PhaseRule",
    "compute_phase",
    "condition_equals",
    "condition_types",
    "conditions_all",
    "conditions_any",
    "matches",
    "new_phase_rule",
]
