# src/marketmatch/realtime.py

"""In-process change notifications for the players table.

Writers publish a ChangeNotification after every committed insert, update,
or delete. Listeners subscribe per table and receive notifications through a
bounded queue. A notification only means "something changed"; listeners are
expected to re-fetch rather than patch local state from it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from marketmatch import config
from marketmatch.db.models import utcnow

logger = logging.getLogger(__name__)

PLAYERS_TABLE = "players"


class ChangeEvent(str, Enum):
    """Kinds of row changes a subscriber can listen for."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


ALL_EVENTS = frozenset(ChangeEvent)


@dataclass(frozen=True)
class ChangeNotification:
    """A single committed change to a watched table."""

    table: str
    event: ChangeEvent
    record_id: int | None = None
    occurred_at: datetime = field(default_factory=utcnow)

    def as_dict(self) -> dict:
        return {
            "table": self.table,
            "event": self.event.value,
            "record_id": self.record_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


class Subscription:
    """A cancellable stream of notifications for one table.

    Iterate it (``async for``) or call :meth:`get`. Call :meth:`unsubscribe`
    (or leave the ``async with`` block) to stop delivery.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        table: str,
        events: frozenset[ChangeEvent],
        maxsize: int,
    ) -> None:
        self.feed = feed
        self.table = table
        self.events = events
        self.queue: asyncio.Queue[ChangeNotification] = asyncio.Queue(maxsize=maxsize)
        self.active = True

    def matches(self, notification: ChangeNotification) -> bool:
        return (
            self.active
            and notification.table == self.table
            and notification.event in self.events
        )

    def deliver(self, notification: ChangeNotification) -> None:
        """Queue a notification, dropping the oldest one if the queue is full."""
        try:
            self.queue.put_nowait(notification)
        except asyncio.QueueFull:
            # Listeners re-fetch on any notification, so losing an older one
            # only coalesces refreshes.
            self.queue.get_nowait()
            self.queue.put_nowait(notification)
            logger.debug("Dropped oldest notification for slow %s subscriber", self.table)

    async def get(self) -> ChangeNotification:
        return await self.queue.get()

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.feed.remove(self)

    async def __aiter__(self) -> AsyncIterator[ChangeNotification]:
        while self.active:
            yield await self.queue.get()

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class ChangeFeed:
    """Publish/subscribe hub keyed by table name."""

    def __init__(self, queue_size: int | None = None) -> None:
        self.queue_size = queue_size or config.CHANGE_FEED_QUEUE_SIZE
        self._subscriptions: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        table: str = PLAYERS_TABLE,
        events: Iterable[ChangeEvent] | None = None,
    ) -> Subscription:
        """Start listening to ``table``; ``events=None`` means every event type."""
        wanted = frozenset(events) if events is not None else ALL_EVENTS
        subscription = Subscription(self, table, wanted, self.queue_size)
        self._subscriptions.add(subscription)
        logger.debug(
            "Subscribed to %s changes",
            table,
            extra={"subscribers": len(self._subscriptions)},
        )
        return subscription

    def remove(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)
        logger.debug(
            "Unsubscribed from %s changes",
            subscription.table,
            extra={"subscribers": len(self._subscriptions)},
        )

    def publish(self, notification: ChangeNotification) -> int:
        """Fan a notification out to every matching subscriber.

        Returns the number of subscribers it was delivered to.
        """
        delivered = 0
        for subscription in list(self._subscriptions):
            if subscription.matches(notification):
                subscription.deliver(notification)
                delivered += 1
        logger.debug(
            "Published %s on %s",
            notification.event.value,
            notification.table,
            extra={"record_id": notification.record_id, "delivered": delivered},
        )
        return delivered


# Process-wide feed shared by the HTTP layer
change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """FastAPI dependency returning the process-wide change feed."""
    return change_feed
