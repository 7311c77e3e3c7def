"""Domain model: conditions, statuses and phased resources."""

from __future__ import annotations

from .condition import (
    Condition,
    find_status_condition,
    is_status_condition_false,
    is_status_condition_true,
    remove_status_condition,
    set_status_condition,
    utcnow,
)
from .enums import ConditionStatus, MatchMode
from .resource import PHASE_UNKNOWN, ManagedResource, PhasedResource

__all__ = [
    "PHASE_UNKNOWN",
    "Condition",
    "ConditionStatus",
    "ManagedResource",
    "MatchMode",
    "PhasedResource",
    "find_status_condition",
    "is_status_condition_false",
    "is_status_condition_true",
    "remove_status_condition",
    "set_status_condition",
    "utcnow",
]
