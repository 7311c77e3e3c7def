"""Phase rules: bind a phase to a matcher; the first satisfied rule wins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from phaserules.domain.model import PHASE_UNKNOWN
from phaserules.domain.rules.matchers import matches

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from phaserules.domain.model import Condition
    from phaserules.domain.rules.matchers import Matcher


@dataclass(frozen=True, slots=True)
class PhaseRule:
    phase: str
    matcher: Matcher

    def __post_init__(self) -> None:
        if not self.phase:
            raise ValueError("Phase rule requires a phase name")

    def satisfies(self, conditions: Sequence[Condition] | None) -> bool:
        """Return whether ``conditions`` satisfy this rule."""

        return matches(self.matcher, conditions)

    def compute_phase(self, conditions: Sequence[Condition] | None) -> str:
        """Return this rule's phase when satisfied, else ``PHASE_UNKNOWN``."""

        return self.phase if self.satisfies(conditions) else PHASE_UNKNOWN


def new_phase_rule(phase: str, matcher: Matcher) -> PhaseRule:
    return PhaseRule(phase=phase, matcher=matcher)


def compute_phase(rules: Iterable[PhaseRule], conditions: Sequence[Condition] | None) -> str:
    """Return the phase of the first rule satisfied by ``conditions``.

    Rules are tried in declaration order. ``PHASE_UNKNOWN`` is returned when nothing
    matches, including for an empty rule list.
    """

    for rule in rules:
        if rule.satisfies(conditions):
            return rule.phase
    return PHASE_UNKNOWN
