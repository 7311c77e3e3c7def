from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from phaserules.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    shutdown,
    startup,
)
from phaserules.domain.model import ConditionStatus, ManagedResource
from phaserules.domain.status import StatusManager

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_require_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StartupError):
        _ = SqlAlchemyUnitOfWork().repositories


def test_unit_of_work_persists_status_changes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.resources.add(ManagedResource(name="bucket"))
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        resource = uow.repositories.resources.get_by_name("bucket")
        assert resource is not None
        manager = StatusManager(uow.repositories.status, resource, ())
        assert manager.set_condition("BucketExists", ConditionStatus.TRUE)
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        stored = uow.repositories.resources.get_by_name("bucket")
        assert stored is not None
        assert [c.type for c in stored.conditions] == ["BucketExists"]
        assert stored.observed_generation == 1


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.resources.add(ManagedResource(name="bucket"))
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.resources.get_by_name("bucket") is None
