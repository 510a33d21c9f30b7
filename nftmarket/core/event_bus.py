"""Event bus — fans ledger notifications out to every subscriber.

Notifications are published after a transaction commits.  A failing
subscriber is logged and skipped; it never rolls back the transaction and
never prevents delivery to the remaining subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EventHandler = Callable[[BaseModel], None]


class EventBus:
    """Synchronous publish/subscribe for marketplace events.

    Usage
    -----
    >>> bus = EventBus()
    >>> received = []
    >>> bus.subscribe(received.append)
    >>> bus.publish(event)
    """

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []
        self._history: list[BaseModel] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Register *handler*.  Registering the same handler twice is a no-op."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    @property
    def history(self) -> list[BaseModel]:
        """Every event published so far, oldest first."""
        return list(self._history)

    def publish(self, event: BaseModel) -> int:
        """Deliver *event* to all subscribers.

        Returns the number of handlers that accepted the event.
        """
        self._history.append(event)
        delivered = 0
        for handler in list(self._handlers):
            try:
                handler(event)
                delivered += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Event handler %r failed for %s: %s",
                    handler,
                    type(event).__name__,
                    exc,
                )
        return delivered
