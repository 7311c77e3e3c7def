"""Webhook configuration for phase transition notifications."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Final

from .env import read_env
from .errors import ConfigurationError

DEFAULT_WEBHOOK_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Target of outbound phase notifications."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout_seconds: float = DEFAULT_WEBHOOK_TIMEOUT_SECONDS


def _parse_headers(raw: str | None) -> dict[str, str]:
    if raw is None:
        return {}
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError("PHASERULES_WEBHOOK_HEADERS must be a JSON object") from exc
    if not isinstance(document, dict):
        raise ConfigurationError("PHASERULES_WEBHOOK_HEADERS must be a JSON object")
    return {str(key): str(value) for key, value in document.items()}


def get_webhook_config() -> WebhookConfig | None:
    """Return the configured webhook, or ``None`` when notifications are disabled."""

    url = read_env("PHASERULES_WEBHOOK_URL")
    if url is None:
        return None
    return WebhookConfig(
        url=url,
        headers=_parse_headers(read_env("PHASERULES_WEBHOOK_HEADERS")),
    )
