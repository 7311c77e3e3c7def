"""Status conditions and the helpers that maintain a condition list.

A resource carries at most one condition per ``type``. All writes go through
``set_status_condition`` which upserts in place and reports whether anything changed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from phaserules.domain.model.enums import ConditionStatus

if TYPE_CHECKING:
    from collections.abc import Sequence


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class Condition:
    """One observed ``(type, status)`` pair with provenance metadata."""

    type: str
    status: ConditionStatus
    reason: str = ""
    message: str = ""
    last_transition_time: datetime | None = None
    observed_generation: int = 0

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("Condition type must not be empty")
        try:
            self.status = ConditionStatus(self.status)
        except ValueError as exc:
            raise ValueError(f"Invalid condition status: {self.status!r}") from exc

    def copy(self) -> Condition:
        return replace(self)


def find_status_condition(conditions: Sequence[Condition], condition_type: str) -> Condition | None:
    """Return the condition of ``condition_type`` or ``None``."""

    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


def set_status_condition(
    conditions: list[Condition],
    new_condition: Condition,
    *,
    now: datetime | None = None,
) -> bool:
    """Upsert ``new_condition`` into ``conditions`` and return whether it changed.

    - an unknown type is appended, stamped with ``now`` unless it carries its own
      transition time
    - a status change replaces the status and refreshes ``last_transition_time``
    - reason/message/observed_generation changes are copied without touching the
      transition time
    """

    timestamp = now or utcnow()
    existing = find_status_condition(conditions, new_condition.type)
    if existing is None:
        added = new_condition.copy()
        if added.last_transition_time is None:
            added.last_transition_time = timestamp
        conditions.append(added)
        return True

    changed = False
    if existing.status != new_condition.status:
        existing.status = new_condition.status
        existing.last_transition_time = new_condition.last_transition_time or timestamp
        changed = True

    if existing.reason != new_condition.reason:
        existing.reason = new_condition.reason
        changed = True

    if existing.message != new_condition.message:
        existing.message = new_condition.message
        changed = True

    if existing.observed_generation != new_condition.observed_generation:
        existing.observed_generation = new_condition.observed_generation
        changed = True

    return changed


def remove_status_condition(conditions: list[Condition], condition_type: str) -> bool:
    """Remove the condition of ``condition_type``; return whether one was removed."""

    for index, condition in enumerate(conditions):
        if condition.type == condition_type:
            del conditions[index]
            return True
    return False


def is_status_condition_true(conditions: Sequence[Condition], condition_type: str) -> bool:
    return _has_status(conditions, condition_type, ConditionStatus.TRUE)


def is_status_condition_false(conditions: Sequence[Condition], condition_type: str) -> bool:
    return _has_status(conditions, condition_type, ConditionStatus.FALSE)


def _has_status(
    conditions: Sequence[Condition],
    condition_type: str,
    status: ConditionStatus,
) -> bool:
    condition = find_status_condition(conditions, condition_type)
    return condition is not None and condition.status == status
