"""Repository and status writer backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from phaserules.adapters.sqlalchemy.mappings import (
    managed_resource_table,
    resource_to_row,
    row_to_resource,
)
from phaserules.domain.patch import status_merge_patch

if TYPE_CHECKING:
    import uuid
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from phaserules.domain.model import ManagedResource, PhasedResource

log = getLogger(__name__)


class ResourceNotFoundError(RuntimeError):
    """Raised when a status write targets a resource that is not stored."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemyResourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ManagedResource) -> None:
        self.session.execute(insert(managed_resource_table).values(**resource_to_row(entity)))

    def get(self, resource_id: uuid.UUID) -> ManagedResource | None:
        stmt = select(managed_resource_table).where(managed_resource_table.c.id == resource_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return row_to_resource(row) if row is not None else None

    def get_by_name(self, name: str) -> ManagedResource | None:
        stmt = select(managed_resource_table).where(managed_resource_table.c.name == name)
        row = self.session.execute(stmt).mappings().one_or_none()
        return row_to_resource(row) if row is not None else None

    def bump_generation(self, resource: ManagedResource) -> int:
        """Record a spec change: increment the stored and in-memory generation."""

        stmt = (
            update(managed_resource_table)
            .where(managed_resource_table.c.id == resource.id)
            .values(generation=managed_resource_table.c.generation + 1)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            raise ResourceNotFoundError(f"Resource not found: {resource.name}")
        return resource.bump_generation()


class SqlAlchemyStatusPatcher:
    """Write only the status fields that differ from the pre-mutation snapshot."""

    def __init__(self, session: Session, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.session = session
        self._clock = clock

    def __call__(self, base: PhasedResource, current: PhasedResource) -> None:
        patch = status_merge_patch(base, current)
        if not patch:
            return

        stmt = (
            update(managed_resource_table)
            .where(managed_resource_table.c.name == current.name)
            .values(**patch, updated_at=self._clock())
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            raise ResourceNotFoundError(f"Resource not found: {current.name}")
        log.debug(f"Patched status of {current.name}: fields={sorted(patch)}")

