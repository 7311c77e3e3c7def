"""Root logger setup for the command line entry point."""

from __future__ import annotations

import logging

from .env import read_env
from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(raw: str | None) -> int:
    """Translate a level name such as ``debug`` into a ``logging`` constant."""

    if raw is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {raw}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger.

    Without an explicit ``level`` the ``PHASERULES_LOG_LEVEL`` variable decides,
    falling back to INFO. ``force=True`` replaces handlers installed earlier.
    """

    if level is None:
        level = resolve_log_level(read_env("PHASERULES_LOG_LEVEL"))
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
