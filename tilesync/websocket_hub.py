from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from tilesync.core.events import Envelope

logger = logging.getLogger(__name__)

SubscriptionHandle = UUID


class SubscriberClosed(RuntimeError):
    def __init__(self, subscriber_id: UUID) -> None:
        super().__init__(f"Subscriber {subscriber_id} is closed")
        self.subscriber_id = subscriber_id


@dataclass(slots=True, eq=False)
class Subscriber:
    """A receiver of published envelopes.

    The connection handler that creates a subscriber owns it and drains `queue`;
    the hub only ever pushes serialized envelopes into it without waiting.
    """

    queue: asyncio.Queue[str]
    id: UUID = field(default_factory=uuid4)
    closed: bool = False

    @classmethod
    def create(cls, *, maxsize: int = 0) -> Subscriber:
        # maxsize=0 => unbounded
        return cls(queue=asyncio.Queue(maxsize=maxsize))

    def deliver(self, message: str) -> None:
        if self.closed:
            raise SubscriberClosed(self.id)
        self.queue.put_nowait(message)

    def close(self) -> None:
        self.closed = True


class BroadcastHub:
    """In-process pub/sub: every subscriber receives every published envelope.

    Contract:
      - `subscribe(subscriber)` registers for future publishes only (no replay).
      - `publish(topic, payload)` is best-effort: a closed or full subscriber is
        skipped without affecting anyone else, and nothing is raised to the caller.
      - `send_to(subscriber, topic, payload)` delivers to one subscriber with the
        same semantics; used for initial-state sync before registration.

    The registry lock is held only to mutate or copy the registry, never while
    delivering, so a slow subscriber cannot stall (un)registration of others.
    """

    def __init__(self) -> None:
        self._subscribers: dict[UUID, Subscriber] = {}
        self._lock = asyncio.Lock()

    async def subscribe(self, subscriber: Subscriber) -> SubscriptionHandle:
        async with self._lock:
            self._subscribers[subscriber.id] = subscriber
            total = len(self._subscribers)
        logger.info("Subscriber %s registered (%d total)", subscriber.id, total)
        return subscriber.id

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        async with self._lock:
            removed = self._subscribers.pop(handle, None)
            total = len(self._subscribers)
        if removed is not None:
            logger.info("Subscriber %s removed (%d total)", handle, total)

    async def publish(self, topic: str, payload: Any) -> None:
        message = _serialize(topic, payload)
        if message is None:
            return

        async with self._lock:
            subscribers = list(self._subscribers.values())

        if not subscribers:
            return

        for subscriber in subscribers:
            _deliver(subscriber, message, topic)

    async def publish_envelope(self, envelope: Envelope) -> None:
        await self.publish(envelope.topic, envelope.payload)

    def send_to(self, subscriber: Subscriber, topic: str, payload: Any) -> bool:
        message = _serialize(topic, payload)
        if message is None:
            return False
        return _deliver(subscriber, message, topic)

    def count(self) -> int:
        # Advisory only; may be stale by the time the caller reads it.
        return len(self._subscribers)


def _serialize(topic: str, payload: Any) -> str | None:
    try:
        return Envelope(topic=topic, payload=payload).model_dump_json()
    except (TypeError, ValueError) as e:
        logger.error("Failed to serialize envelope for topic %s: %s", topic, e)
        return None


def _deliver(subscriber: Subscriber, message: str, topic: str) -> bool:
    try:
        subscriber.deliver(message)
    except SubscriberClosed:
        logger.warning("Dropping %s for closed subscriber %s", topic, subscriber.id)
        return False
    except asyncio.QueueFull:
        logger.debug("Dropping %s for subscriber %s: outbound queue full", topic, subscriber.id)
        return False
    return True
