"""SQLAlchemy-backed unit of work for managed resources.

The adapter keeps one engine per process. ``startup`` binds it (creating the tables on
first use) and every ``SqlAlchemyUnitOfWork`` opens a fresh session from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from phaserules.adapters.sqlalchemy.mappings import create_all_tables
from phaserules.adapters.sqlalchemy.repositories import (
    SqlAlchemyResourceRepository,
    SqlAlchemyStatusPatcher,
)
from phaserules.config.storage import get_database_config
from phaserules.domain.ports.unit_of_work import ResourceRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup`` or out of order."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        # loaded resources are read after the session closes
        self.session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def reset(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.session_factory = None

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call phaserules.adapters.sqlalchemy."
                "startup() before requesting a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one for ``database_uri``) and create tables."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )
    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri, future=True)
    create_all_tables(engine)
    _STATE.bind(engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; mostly used by tests."""

    _STATE.reset()


class SqlAlchemyUnitOfWork:
    """One session wrapping the resource repository and the status patcher."""

    def __init__(self) -> None:
        self._session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: ResourceRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = self._session_factory()
        self._repositories = ResourceRepositories(
            resources=SqlAlchemyResourceRepository(self._session),
            status=SqlAlchemyStatusPatcher(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @property
    def repositories(self) -> ResourceRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from phaserules.domain.ports.unit_of_work import ResourceUnitOfWork

    _uow_check: ResourceUnitOfWork = SqlAlchemyUnitOfWork()
