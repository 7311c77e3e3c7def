"""Ports for persisting resources and their status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from phaserules.domain.model import ManagedResource, PhasedResource


@runtime_checkable
class StatusPatcher(Protocol):
    """Write the difference between ``base`` and ``current`` to storage.

    Implementations apply a partial update only; they never overwrite unchanged
    fields and never read the result back. Failures are raised as-is.
    """

    def __call__(self, base: PhasedResource, current: PhasedResource) -> None: ...


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ResourceRepository(Repository["ManagedResource"], Protocol):
    """Persistence contract for managed resources."""

    def get(self, resource_id: UUID) -> ManagedResource | None: ...

    def get_by_name(self, name: str) -> ManagedResource | None: ...

    def bump_generation(self, resource: ManagedResource) -> int: ...
