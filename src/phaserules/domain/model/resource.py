"""Resources whose status carries a phase derived from their conditions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Self
from uuid import UUID, uuid4

from phaserules.domain.model.condition import Condition

if TYPE_CHECKING:
    from datetime import datetime

PHASE_UNKNOWN = "Unknown"


def new_id() -> UUID:
    return uuid4()


class PhasedResource(Protocol):
    """Structural contract for anything a ``StatusManager`` can drive.

    ``generation`` is the resource's own counter (bumped on spec changes);
    ``observed_generation`` records the generation the status was last computed for.
    """

    name: str
    conditions: list[Condition]
    phase: str
    observed_generation: int

    @property
    def generation(self) -> int: ...

    def snapshot(self) -> Self: ...


@dataclass(eq=False, kw_only=True)
class ManagedResource:
    """Concrete resource persisted by the storage adapters."""

    name: str
    id: UUID = field(default_factory=new_id)
    generation: int = 1
    phase: str = PHASE_UNKNOWN
    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list["Condition"])
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Resource name must not be empty")
        if self.generation < 1:
            raise ValueError("Resource generation must be positive")

    def snapshot(self) -> ManagedResource:
        """Return a detached copy; later mutations of ``self`` do not leak into it."""

        return ManagedResource(
            name=self.name,
            id=self.id,
            generation=self.generation,
            phase=self.phase,
            observed_generation=self.observed_generation,
            conditions=[condition.copy() for condition in self.conditions],
            updated_at=self.updated_at,
        )

    def bump_generation(self) -> int:
        self.generation += 1
        return self.generation

    @property
    def is_status_current(self) -> bool:
        """Whether the status was computed for the latest generation."""

        return self.observed_generation >= self.generation


if TYPE_CHECKING:
    _resource_check: PhasedResource = ManagedResource(name="check")
