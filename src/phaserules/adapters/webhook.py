"""Webhook notifier for phase transitions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from phaserules.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient
from phaserules.config.webhook import get_webhook_config
from phaserules.domain.ports.notification import PhaseNotifier, PhaseTransition

if TYPE_CHECKING:
    from collections.abc import Callable

    from phaserules.config.webhook import WebhookConfig

log = getLogger(__name__)

_ACCEPTED_STATUS_CODES: Final[frozenset[int]] = frozenset({200, 201})


class WebhookError(RuntimeError):
    """Raised when the webhook endpoint rejects a notification."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_resilience_config(config: WebhookConfig | None) -> ResilienceConfig:
    return ResilienceConfig(
        name="webhook",
        timeout_seconds=config.timeout_seconds if config else 10.0,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def transition_payload(transition: PhaseTransition) -> dict[str, object]:
    return {
        "resource": transition.resource,
        "previous_phase": transition.previous_phase,
        "phase": transition.phase,
        "observed_generation": transition.observed_generation,
    }


@dataclass(slots=True)
class WebhookNotifier:
    """POST each phase transition to the configured URL.

    A notifier without configuration does nothing, so callers can wire it
    unconditionally.
    """

    config: WebhookConfig | None = field(default_factory=get_webhook_config)
    resilience: ResilienceConfig | None = None
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, transition: PhaseTransition) -> None:
        if self.config is None:
            return
        asyncio.run(self.send(transition))

    async def send(self, transition: PhaseTransition) -> None:
        if self.config is None:
            return
        resilience = self.resilience or _default_resilience_config(self.config)
        async with self.client_factory(resilience) as client:
            response = await client.post_json(
                self.config.url,
                transition_payload(transition),
                headers=self.config.headers,
            )

        if response.status_code not in _ACCEPTED_STATUS_CODES:
            raise WebhookError(
                f"failed to send webhook: {response.reason_phrase}, status: {response.status_code}",
                status_code=response.status_code,
            )
        log.info(
            f"Sent phase notification for {transition.resource}: "
            f"{transition.previous_phase} -> {transition.phase}"
        )


if TYPE_CHECKING:
    _notifier_check: PhaseNotifier = WebhookNotifier()
