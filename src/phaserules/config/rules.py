"""Location of the static phase rule file."""

from __future__ import annotations

from pathlib import Path

from .env import require_env_var


def get_rules_path(override: str | Path | None = None) -> Path:
    """Return the rule file path, preferring ``override`` over ``PHASERULES_RULES_FILE``."""

    raw = override if override is not None else require_env_var("PHASERULES_RULES_FILE")
    return Path(raw).expanduser().resolve()
