"""Condition matchers: a closed, immutable boolean expression tree over conditions.

A matcher is either a leaf (``ConditionEquals``: one condition type, a set of allowed
statuses) or a group (``ConditionGroup``: ALL/ANY over child matchers). Trees are
built bottom-up with ``condition_equals``, ``conditions_all`` and ``conditions_any``
and never change afterwards, so they can be shared freely between evaluations.

Missing conditions: every condition type referenced anywhere in the tree but absent
from the evaluated list is treated as if it were present with status ``Unknown``.
Passing ``None`` instead of a list means "no information" and never matches.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from phaserules.domain.model import ConditionStatus, MatchMode

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from phaserules.domain.model import Condition


type ObservedStatuses = Mapping[str, frozenset[ConditionStatus]]


@dataclass(frozen=True, slots=True)
class ConditionEquals:
    """Matches when the condition of ``condition_type`` has one of ``statuses``."""

    condition_type: str
    statuses: frozenset[ConditionStatus]


@dataclass(frozen=True, slots=True)
class ConditionGroup:
    """Combines child matchers; an empty ALL group matches, an empty ANY group does not."""

    mode: MatchMode
    matchers: tuple[Matcher, ...] = ()

    def __post_init__(self) -> None:
        try:
            mode = MatchMode(self.mode)
        except ValueError as exc:
            raise ValueError(f"Invalid match mode: {self.mode!r}") from exc
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "matchers", tuple(self.matchers))


type Matcher = ConditionEquals | ConditionGroup


def condition_equals(condition_type: str, *statuses: ConditionStatus | str) -> ConditionEquals:
    """Leaf matcher for one condition type that may equal any of ``statuses``."""

    if not condition_type:
        raise ValueError("Condition type must not be empty")
    return ConditionEquals(
        condition_type=condition_type,
        statuses=frozenset(ConditionStatus(status) for status in statuses),
    )


def conditions_all(*matchers: Matcher) -> ConditionGroup:
    return ConditionGroup(mode=MatchMode.ALL, matchers=tuple(matchers))


def conditions_any(*matchers: Matcher) -> ConditionGroup:
    return ConditionGroup(mode=MatchMode.ANY, matchers=tuple(matchers))


@lru_cache(maxsize=512)
def condition_types(matcher: Matcher) -> frozenset[str]:
    """Return every condition type referenced anywhere in ``matcher``."""

    match matcher:
        case ConditionEquals(condition_type=condition_type):
            return frozenset((condition_type,))
        case ConditionGroup(matchers=children):
            types: set[str] = set()
            for child in children:
                types |= condition_types(child)
            return frozenset(types)


def matches(matcher: Matcher, conditions: Sequence[Condition] | None) -> bool:
    """Evaluate ``matcher`` against ``conditions``.

    The caller's list is only read; missing types are filled in on a private view.
    """

    if conditions is None:
        return False
    observed = observe(conditions, referenced=condition_types(matcher))
    return _evaluate(matcher, observed)


def observe(
    conditions: Iterable[Condition],
    *,
    referenced: Iterable[str] = (),
) -> dict[str, frozenset[ConditionStatus]]:
    """Index statuses by condition type, adding ``Unknown`` for unobserved ``referenced`` types."""

    collected: defaultdict[str, set[ConditionStatus]] = defaultdict(set)
    for condition in conditions:
        collected[condition.type].add(condition.status)
    for condition_type in referenced:
        if condition_type not in collected:
            collected[condition_type].add(ConditionStatus.UNKNOWN)
    return {condition_type: frozenset(statuses) for condition_type, statuses in collected.items()}


def _evaluate(matcher: Matcher, observed: ObservedStatuses) -> bool:
    match matcher:
        case ConditionEquals(condition_type=condition_type, statuses=allowed):
            return not allowed.isdisjoint(observed.get(condition_type, frozenset()))
        case ConditionGroup(mode=MatchMode.ALL, matchers=children):
            return all(_evaluate(child, observed) for child in children)
        case ConditionGroup(mode=MatchMode.ANY, matchers=children):
            return any(_evaluate(child, observed) for child in children)
        case _:
            raise TypeError(f"Unsupported matcher: {matcher!r}")
