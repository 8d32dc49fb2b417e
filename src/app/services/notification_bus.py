"""
Notification Bus

In-process publish/subscribe for live notification delivery. Each open
stream holds one Subscription scoped to (team, recipient) with its own
bounded queue. Publishing never blocks: a full queue drops the event for
that subscriber only.
"""

import asyncio
import json
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Dict, Set, Tuple
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)

SubscriptionKey = Tuple[UUID, UUID]


@dataclass(eq=False)
class Subscription:
    team_id: UUID
    recipient_id: UUID
    queue: asyncio.Queue
    id: UUID = field(default_factory=uuid4)

    @property
    def key(self) -> SubscriptionKey:
        return (self.team_id, self.recipient_id)


def format_sse(event: str, data: dict) -> str:
    """Format one Server-Sent Events message"""
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


class NotificationBus:
    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscriptions: Dict[SubscriptionKey, Set[Subscription]] = defaultdict(set)

    def subscribe(self, team_id: UUID, recipient_id: UUID) -> Subscription:
        subscription = Subscription(
            team_id=team_id,
            recipient_id=recipient_id,
            queue=asyncio.Queue(maxsize=self.max_queue_size),
        )
        self._subscriptions[subscription.key].add(subscription)
        logger.info(f"Notification stream opened for user {recipient_id} in team {team_id}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.key)
        if not subscribers:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscriptions[subscription.key]
        logger.info(f"Notification stream closed for user {subscription.recipient_id}")

    def subscriber_count(self, team_id: UUID, recipient_id: UUID) -> int:
        return len(self._subscriptions.get((team_id, recipient_id), ()))

    def publish(self, team_id: UUID, recipient_id: UUID, payload: dict) -> int:
        """Deliver payload to every open stream of the recipient; returns deliveries"""
        delivered = 0
        for subscription in list(self._subscriptions.get((team_id, recipient_id), ())):
            try:
                subscription.queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    f"Notification queue full for user {recipient_id}, dropping event"
                )
        return delivered

    async def stream(
        self, team_id: UUID, recipient_id: UUID, heartbeat_seconds: float = 30
    ) -> AsyncIterator[str]:
        """
        Async generator for SSE streaming, for use with StreamingResponse.

        Subscribes on first iteration and emits a "connected" event, then one
        "notification" event per published payload and a "ping" event
        whenever the stream has been idle for heartbeat_seconds. A stream
        that is never iterated never registers a subscription.
        """
        subscription = self.subscribe(team_id, recipient_id)
        try:
            yield format_sse("connected", {"timestamp": datetime.utcnow().isoformat()})
            while True:
                try:
                    payload = await asyncio.wait_for(
                        subscription.queue.get(), timeout=heartbeat_seconds
                    )
                except asyncio.TimeoutError:
                    yield format_sse("ping", {"timestamp": datetime.utcnow().isoformat()})
                    continue
                yield format_sse("notification", payload)
        finally:
            self.unsubscribe(subscription)


notification_bus = NotificationBus()
