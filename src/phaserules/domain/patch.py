"""Compute merge patches of a resource status against an earlier snapshot."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Final

from phaserules.domain.model import Condition, ConditionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from phaserules.domain.model import PhasedResource

STATUS_FIELDS: Final[tuple[str, ...]] = ("phase", "observed_generation", "conditions")

type ConditionPayload = dict[str, Any]


def condition_to_payload(condition: Condition) -> ConditionPayload:
    timestamp = condition.last_transition_time
    return {
        "type": condition.type,
        "status": str(condition.status),
        "reason": condition.reason,
        "message": condition.message,
        "last_transition_time": timestamp.isoformat() if timestamp else None,
        "observed_generation": condition.observed_generation,
    }


def condition_from_payload(payload: Mapping[str, Any]) -> Condition:
    raw_timestamp = payload.get("last_transition_time")
    return Condition(
        type=payload["type"],
        status=ConditionStatus(payload["status"]),
        reason=payload.get("reason") or "",
        message=payload.get("message") or "",
        last_transition_time=datetime.fromisoformat(raw_timestamp) if raw_timestamp else None,
        observed_generation=int(payload.get("observed_generation") or 0),
    )


def conditions_to_payload(conditions: Iterable[Condition]) -> list[ConditionPayload]:
    return [condition_to_payload(condition) for condition in conditions]


def conditions_from_payload(payload: Iterable[Mapping[str, Any]] | None) -> list[Condition]:
    return [condition_from_payload(item) for item in payload or ()]


def status_payload(resource: PhasedResource) -> dict[str, Any]:
    return {
        "phase": resource.phase,
        "observed_generation": resource.observed_generation,
        "conditions": conditions_to_payload(resource.conditions),
    }


def status_merge_patch(base: PhasedResource, current: PhasedResource) -> dict[str, Any]:
    """Return the status fields of ``current`` that differ from ``base``.

    Lists are replaced wholesale, as in a JSON merge patch. An empty result means there
    is nothing to write.
    """

    before = status_payload(base)
    after = status_payload(current)
    return {name: after[name] for name in STATUS_FIELDS if before[name] != after[name]}
