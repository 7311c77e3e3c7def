"""Domain port definitions for adapters."""

from __future__ import annotations

from .notification import PhaseNotifier, PhaseTransition
from .persistence import Repository, ResourceRepository, StatusPatcher
from .unit_of_work import (
    RepositoryCollection,
    ResourceRepositories,
    ResourceUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "PhaseNotifier",
    "PhaseTransition",
    "Repository",
    "RepositoryCollection",
    "ResourceRepositories",
    "ResourceRepository",
    "ResourceUnitOfWork",
    "StatusPatcher",
    "UnitOfWork",
]
