"""In-process fan-out of post feed changes to connected WebSocket clients.

Delivery is best-effort and at-most-once per connected subscriber. There is
no event log: a client that connects after a broadcast never sees it.
"""
import asyncio
import logging
from typing import Any, Protocol

from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

NEW_POST = "newPost"
UPDATE_POST = "updatePost"
DELETE_POST = "deletePost"


class FeedSubscriber(Protocol):
    async def send_json(self, data: Any) -> None: ...


class FeedBroadcaster:
    """Tracks feed subscribers and pushes events to all of them."""

    def __init__(self) -> None:
        self._subscribers: set[FeedSubscriber] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, session: FeedSubscriber) -> None:
        self._subscribers.add(session)
        logger.info("Feed subscriber connected (%d total)", len(self._subscribers))

    def unsubscribe(self, session: FeedSubscriber) -> None:
        self._subscribers.discard(session)
        logger.info("Feed subscriber disconnected (%d total)", len(self._subscribers))

    async def broadcast(self, event: str, data: Any) -> int:
        """Send ``{"event": event, "data": data}`` to every current subscriber.

        The subscriber set is snapshotted first so (un)subscribes during the
        fan-out do not disturb it. A subscriber whose send fails is dropped;
        the others still receive the frame. Returns the number delivered.
        """
        targets = list(self._subscribers)
        if not targets:
            return 0

        frame = {"event": event, "data": jsonable_encoder(data)}
        results = await asyncio.gather(
            *(subscriber.send_json(frame) for subscriber in targets),
            return_exceptions=True,
        )

        delivered = 0
        for subscriber, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning("Dropping feed subscriber after failed send: %s", result)
                self._subscribers.discard(subscriber)
            else:
                delivered += 1
        logger.debug("Broadcast %s to %d/%d subscribers", event, delivered, len(targets))
        return delivered
