"""Ports for announcing phase transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class PhaseTransition:
    """A completed recomputation of a resource's phase."""

    resource: str
    previous_phase: str
    phase: str
    observed_generation: int

    @property
    def phase_changed(self) -> bool:
        return self.previous_phase != self.phase


@runtime_checkable
class PhaseNotifier(Protocol):
    """Deliver a phase transition to an outside party."""

    def __call__(self, transition: PhaseTransition) -> None: ...
