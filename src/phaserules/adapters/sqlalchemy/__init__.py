"""SQLAlchemy adapter package for phaserules."""

from __future__ import annotations

from .mappings import create_all_tables, managed_resource_table, metadata
from .repositories import (
    ResourceNotFoundError,
    SqlAlchemyResourceRepository,
    SqlAlchemyStatusPatcher,
)
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "ResourceNotFoundError",
    "SqlAlchemyResourceRepository",
    "SqlAlchemyStatusPatcher",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "managed_resource_table",
    "metadata",
    "shutdown",
    "startup",
]
