"""SQLAlchemy table metadata for managed resources."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    Uuid,
)

from phaserules.domain.model import PHASE_UNKNOWN, ManagedResource
from phaserules.domain.patch import conditions_from_payload, conditions_to_payload

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine, RowMapping

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData()

managed_resource_table = Table(
    "managed_resources",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("name", String(253), nullable=False, unique=True),
    Column("generation", Integer, nullable=False, default=1),
    Column("phase", String(128), nullable=False, default=PHASE_UNKNOWN),
    Column("observed_generation", Integer, nullable=False, default=0),
    # serialized condition payloads, see phaserules.domain.patch
    Column("conditions", JSON, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=True),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)


def resource_to_row(resource: ManagedResource) -> dict[str, Any]:
    return {
        "id": resource.id,
        "name": resource.name,
        "generation": resource.generation,
        "phase": resource.phase,
        "observed_generation": resource.observed_generation,
        "conditions": conditions_to_payload(resource.conditions),
        "updated_at": resource.updated_at,
    }


def row_to_resource(row: RowMapping) -> ManagedResource:
    return ManagedResource(
        id=row["id"],
        name=row["name"],
        generation=row["generation"],
        phase=row["phase"],
        observed_generation=row["observed_generation"],
        conditions=conditions_from_payload(row["conditions"]),
        updated_at=row["updated_at"],
    )
