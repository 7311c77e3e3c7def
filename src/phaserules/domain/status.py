"""Keep a resource's phase in sync with its status conditions.

``StatusManager`` is built per reconciliation pass over a single resource. Every
``set_condition``/``set_conditions`` call

1. snapshots the resource,
2. upserts the given conditions,
3. recomputes the phase and stamps ``observed_generation`` only when a condition
   actually changed, and
4. hands the snapshot and the mutated resource to the ``StatusPatcher`` exactly once.

Nothing is rolled back when the patcher raises: the in-memory status already reflects
the new conditions, and a retry with the same conditions is a no-op for change
detection, so callers simply re-run their reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from phaserules.domain.model import Condition, ConditionStatus, set_status_condition, utcnow
from phaserules.domain.ports.notification import PhaseTransition
from phaserules.domain.rules import compute_phase

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime
    from logging import Logger, LoggerAdapter

    from phaserules.domain.model import PhasedResource
    from phaserules.domain.ports.persistence import StatusPatcher
    from phaserules.domain.rules import PhaseRule

    type StatusLogger = Logger | LoggerAdapter[Logger]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConditionUpdate:
    """Caller-facing request to set one condition."""

    type: str
    status: ConditionStatus | str
    reason: str = ""
    message: str = ""


class StatusManager:
    """Upsert conditions on one resource, recompute its phase and persist the delta."""

    def __init__(
        self,
        patcher: StatusPatcher,
        resource: PhasedResource,
        rules: Sequence[PhaseRule],
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.patcher = patcher
        self.resource = resource
        self.rules: tuple[PhaseRule, ...] = tuple(rules)
        self._clock = clock
        self._last_transition: PhaseTransition | None = None

    @property
    def last_transition(self) -> PhaseTransition | None:
        """Phase before/after the most recent change made through this manager."""

        return self._last_transition

    def set_condition(
        self,
        condition_type: str,
        status: ConditionStatus | str,
        reason: str = "",
        message: str = "",
        *,
        logger: StatusLogger | None = None,
    ) -> bool:
        """Set a single condition; return whether the status changed."""

        update = ConditionUpdate(type=condition_type, status=status, reason=reason, message=message)
        return self.set_conditions([update], logger=logger)

    def set_conditions(
        self,
        updates: Iterable[ConditionUpdate],
        *,
        logger: StatusLogger | None = None,
    ) -> bool:
        """Set several conditions with a single recompute and a single persist."""

        logger = logger or log
        generation = self.resource.generation
        # validate everything before touching the resource
        incoming = [
            Condition(
                type=update.type,
                status=ConditionStatus(update.status),
                reason=update.reason,
                message=update.message,
                observed_generation=generation,
            )
            for update in updates
        ]

        base = self.resource.snapshot()
        now = self._clock()
        changed = False
        for condition in incoming:
            if set_status_condition(self.resource.conditions, condition, now=now):
                changed = True
                logger.info(
                    "Status condition updated: condition=%s, status=%s, reason=%s, message=%s",
                    condition.type,
                    condition.status,
                    condition.reason,
                    condition.message,
                )

        if not changed:
            return False

        transition = self._recompute_phase()
        logger.info(
            "Recomputed phase for %s: %s -> %s (generation %s)",
            transition.resource,
            transition.previous_phase,
            transition.phase,
            transition.observed_generation,
        )
        self.patcher(base, self.resource)
        return True

    def _recompute_phase(self) -> PhaseTransition:
        resource = self.resource
        previous_phase = resource.phase
        resource.phase = compute_phase(self.rules, resource.conditions)
        resource.observed_generation = resource.generation
        self._last_transition = PhaseTransition(
            resource=resource.name,
            previous_phase=previous_phase,
            phase=resource.phase,
            observed_generation=resource.observed_generation,
        )
        return self._last_transition
