"""
Agent notification for confirmed viewing requests.

In production this would post to the agents' CRM inbox or send an email;
here the default notifier keeps an in-memory outbox that the console demo
and tests can inspect.
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, TypedDict

from concierge.errors import NotificationError
from concierge.schemas.conversation_schema import ViewingRequest

logger = logging.getLogger(__name__)

# Any coroutine taking a request. Implementations raise NotificationError on failure.
ViewingNotifier = Callable[[ViewingRequest], Awaitable[None]]


class OutboxRecord(TypedDict):
    """A delivered viewing request with its delivery timestamp."""

    request: ViewingRequest
    delivered_at: str


class AgentNotifier:
    """In-memory outbox of viewing requests handed to the sales team."""

    def __init__(self, accepting: bool = True) -> None:
        self.accepting = accepting
        self._outbox: list[OutboxRecord] = []

    async def __call__(self, request: ViewingRequest) -> None:
        if not self.accepting:
            raise NotificationError("Agent outbox is not accepting requests")
        self._outbox.append({
            "request": request,
            "delivered_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info(
            "Viewing request queued for property %s: %s on %s at %s",
            request.property_id, request.client_name,
            request.preferred_date, request.preferred_time,
        )

    @property
    def outbox(self) -> list[OutboxRecord]:
        return list(self._outbox)

    def reset(self) -> None:
        """Clear the outbox. Used by test fixtures for isolation."""
        self._outbox.clear()
