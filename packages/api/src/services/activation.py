# This project was developed with assistance from AI tools.
"""Account activation signal.

When a checklist first reaches 100% the progress aggregator stamps
``activated_at`` and returns an ``ActivationEvent``. Routes dispatch it to the
registered listeners after the transaction commits. The durable record is
the stamp plus its audit event, so listener failures are logged and dropped.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

import httpx

from ..core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationEvent:
    employee_id: int
    checklist_id: int
    activated_at: datetime

    def to_payload(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "checklist_id": self.checklist_id,
            "activated_at": self.activated_at.isoformat(),
        }


ActivationListener = Callable[[ActivationEvent], Awaitable[None]]

_listeners: list[ActivationListener] = []


def register_activation_listener(listener: ActivationListener) -> None:
    if listener not in _listeners:
        _listeners.append(listener)


def clear_activation_listeners() -> None:
    _listeners.clear()


async def dispatch_activation(event: ActivationEvent) -> None:
    """Deliver an activation event to every listener; never raises."""
    if not _listeners:
        logger.info(
            "Activation for employee %s (checklist %s) has no listeners",
            event.employee_id,
            event.checklist_id,
        )
        return
    for listener in list(_listeners):
        try:
            await listener(event)
        except Exception:
            logger.exception(
                "Activation listener %r failed for employee %s",
                listener,
                event.employee_id,
            )


class AccountServiceClient:
    """Posts activation events to the account service."""

    def __init__(self, base_url: str | None, timeout: float = 5.0, transport=None):
        self._base_url = base_url.rstrip("/") if base_url else None
        self._timeout = timeout
        self._transport = transport

    async def __call__(self, event: ActivationEvent) -> None:
        if self._base_url is None:
            logger.info(
                "ACCOUNT_SERVICE_URL not set; employee %s activation recorded locally only",
                event.employee_id,
            )
            return

        url = f"{self._base_url}/accounts/{event.employee_id}/activate"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(url, json=event.to_payload())
            response.raise_for_status()
        logger.info("Account service activated employee %s", event.employee_id)


def init_activation_listeners(cfg: Settings) -> AccountServiceClient:
    """Register the account-service listener (called once from app lifespan)."""
    client = AccountServiceClient(cfg.ACCOUNT_SERVICE_URL, timeout=cfg.ACCOUNT_SERVICE_TIMEOUT)
    register_activation_listener(client)
    return client
