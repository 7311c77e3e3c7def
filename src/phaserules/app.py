"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from phaserules.adapters.sqlalchemy.repositories import ResourceNotFoundError
from phaserules.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from phaserules.adapters.webhook import WebhookError, WebhookNotifier
from phaserules.config import ConfigurationError
from phaserules.domain.model import ManagedResource
from phaserules.domain.ports.unit_of_work import ResourceUnitOfWork
from phaserules.domain.status import StatusManager

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from phaserules.domain.ports.notification import PhaseNotifier, PhaseTransition
    from phaserules.domain.rules import PhaseRule
    from phaserules.domain.status import ConditionUpdate

UnitOfWorkFactory = Callable[[], ResourceUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class ApplyConditionsResult:
    """Outcome of one reconciliation pass over a resource's conditions."""

    resource: ManagedResource
    changed: bool
    transition: PhaseTransition | None = None
    notified: bool = False


def _default_unit_of_work() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def create_resource(
    name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ManagedResource:
    """Store a new resource with an unknown phase and no conditions."""

    effective_uow = unit_of_work_factory or _default_unit_of_work()
    resource = ManagedResource(name=name)
    with effective_uow() as uow:
        uow.repositories.resources.add(resource)
        uow.commit()
    log.info(f"Created resource {resource.name} ({resource.id})")
    return resource


def bump_generation(
    name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ManagedResource:
    """Record a spec change for ``name`` by incrementing its generation."""

    effective_uow = unit_of_work_factory or _default_unit_of_work()
    with effective_uow() as uow:
        resource = uow.repositories.resources.get_by_name(name)
        if resource is None:
            raise ResourceNotFoundError(f"Resource not found: {name}")
        uow.repositories.resources.bump_generation(resource)
        uow.commit()
    log.info(f"Bumped generation of {resource.name} to {resource.generation}")
    return resource


def apply_conditions(
    name: str,
    updates: Iterable[ConditionUpdate],
    *,
    rules: Sequence[PhaseRule],
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    notifier: PhaseNotifier | None = None,
) -> ApplyConditionsResult:
    """Set conditions on ``name``, recompute its phase and persist the status delta.

    A phase change is announced through ``notifier`` after the commit. Notification
    failures are logged and reported via ``notified=False``; the stored status stays.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work()

    with effective_uow() as uow:
        resource = uow.repositories.resources.get_by_name(name)
        if resource is None:
            raise ResourceNotFoundError(f"Resource not found: {name}")
        manager = StatusManager(uow.repositories.status, resource, rules)
        changed = manager.set_conditions(updates)
        if changed:
            uow.commit()

    result = ApplyConditionsResult(
        resource=resource,
        changed=changed,
        transition=manager.last_transition,
    )
    transition = manager.last_transition
    if transition is None or not transition.phase_changed:
        return result

    try:
        # the default notifier reads its config only once there is something to send
        effective_notifier = notifier or WebhookNotifier()
        effective_notifier(transition)
    except (ConfigurationError, WebhookError, httpx.HTTPError):
        log.exception(f"Failed to notify phase change of {transition.resource}")
    else:
        result.notified = True
    return result
