from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from phaserules.adapters.sqlalchemy import ResourceNotFoundError
from phaserules.adapters.webhook import WebhookError
from phaserules.app import apply_conditions, bump_generation, create_resource
from phaserules.domain.model import ConditionStatus
from phaserules.domain.rules import condition_equals, conditions_all, new_phase_rule
from phaserules.domain.status import ConditionUpdate
from tests.helpers.status import RecordingNotifier

if TYPE_CHECKING:
    from collections.abc import Callable

    from phaserules.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from phaserules.domain.model import ManagedResource

type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]

RULES = (
    new_phase_rule(
        "Ready",
        conditions_all(
            condition_equals("BucketExists", ConditionStatus.TRUE),
            condition_equals("PolicyApplied", ConditionStatus.TRUE),
        ),
    ),
    new_phase_rule("Pending", condition_equals("BucketExists", ConditionStatus.TRUE)),
)


def _ready_updates() -> list[ConditionUpdate]:
    return [
        ConditionUpdate(type="BucketExists", status=ConditionStatus.TRUE, reason="Created"),
        ConditionUpdate(type="PolicyApplied", status="True"),
    ]


def _load(factory: UnitOfWorkFactory, name: str) -> ManagedResource | None:
    with factory() as uow:
        return uow.repositories.resources.get_by_name(name)


def test_apply_conditions_persists_phase_and_notifies(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)
    notifier = RecordingNotifier()

    result = apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    assert result.changed
    assert result.notified
    assert result.resource.phase == "Ready"
    assert [t.phase for t in notifier.transitions] == ["Ready"]
    assert notifier.transitions[0].previous_phase == "Unknown"

    stored = _load(sqlite_unit_of_work, "bucket")
    assert stored is not None
    assert stored.phase == "Ready"
    assert stored.observed_generation == 1
    assert [c.type for c in stored.conditions] == ["BucketExists", "PolicyApplied"]


def test_repeated_conditions_are_a_no_op(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)
    notifier = RecordingNotifier()
    apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    result = apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    assert not result.changed
    assert result.transition is None
    assert not result.notified
    assert len(notifier.transitions) == 1


def test_change_without_phase_change_skips_notification(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)
    notifier = RecordingNotifier()
    apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    result = apply_conditions(
        "bucket",
        [ConditionUpdate(type="BucketExists", status="True", reason="Adopted")],
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    assert result.changed
    assert result.transition is not None
    assert not result.transition.phase_changed
    assert len(notifier.transitions) == 1
    stored = _load(sqlite_unit_of_work, "bucket")
    assert stored is not None
    assert stored.conditions[0].reason == "Adopted"


def test_notification_failure_keeps_stored_status(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)
    notifier = RecordingNotifier(error=WebhookError("rejected", status_code=500))

    result = apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=notifier,
    )

    assert result.changed
    assert not result.notified
    stored = _load(sqlite_unit_of_work, "bucket")
    assert stored is not None
    assert stored.phase == "Ready"


def test_generation_bump_is_observed_on_next_update(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)
    apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=RecordingNotifier(),
    )
    bumped = bump_generation("bucket", unit_of_work_factory=sqlite_unit_of_work)
    assert bumped.generation == 2
    assert not bumped.is_status_current

    result = apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
        notifier=RecordingNotifier(),
    )

    assert result.changed
    assert result.resource.observed_generation == 2
    assert all(c.observed_generation == 2 for c in result.resource.conditions)


def test_unknown_resource_raises(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with pytest.raises(ResourceNotFoundError):
        apply_conditions(
            "ghost",
            _ready_updates(),
            rules=RULES,
            unit_of_work_factory=sqlite_unit_of_work,
            notifier=RecordingNotifier(),
        )

    with pytest.raises(ResourceNotFoundError):
        bump_generation("ghost", unit_of_work_factory=sqlite_unit_of_work)


def test_malformed_webhook_config_does_not_block_status_sync(
    sqlite_unit_of_work: UnitOfWorkFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PHASERULES_WEBHOOK_URL", "https://hooks.example/phase")
    monkeypatch.setenv("PHASERULES_WEBHOOK_HEADERS", "not json")
    create_resource("bucket", unit_of_work_factory=sqlite_unit_of_work)

    result = apply_conditions(
        "bucket",
        _ready_updates(),
        rules=RULES,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.changed
    assert result.transition is not None
    assert result.transition.phase_changed
    assert not result.notified
    stored = _load(sqlite_unit_of_work, "bucket")
    assert stored is not None
    assert stored.phase == "Ready"
