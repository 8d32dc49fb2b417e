import asyncio
import json
from uuid import uuid4

import pytest

from src.app.services.notification_bus import NotificationBus, format_sse


def parse(message: str):
    event_line, data_line = message.strip().split("\n")
    return event_line[len("event: "):], json.loads(data_line[len("data: "):])


def test_format_sse():
    assert format_sse("ping", {"a": 1}) == 'event: ping\ndata: {"a": 1}\n\n'


def test_publish_reaches_only_matching_subscription():
    bus = NotificationBus()
    team_id, alice, bob = uuid4(), uuid4(), uuid4()
    alice_sub = bus.subscribe(team_id, alice)
    bob_sub = bus.subscribe(team_id, bob)
    other_team_sub = bus.subscribe(uuid4(), alice)

    delivered = bus.publish(team_id, alice, {"id": "n1"})

    assert delivered == 1
    assert alice_sub.queue.get_nowait() == {"id": "n1"}
    assert bob_sub.queue.empty()
    assert other_team_sub.queue.empty()


def test_full_queue_drops_event_for_that_subscriber_only():
    bus = NotificationBus(max_queue_size=1)
    team_id, user_id = uuid4(), uuid4()
    slow = bus.subscribe(team_id, user_id)
    bus.publish(team_id, user_id, {"id": "first"})
    fast = bus.subscribe(team_id, user_id)

    delivered = bus.publish(team_id, user_id, {"id": "second"})

    assert delivered == 1
    assert slow.queue.get_nowait() == {"id": "first"}
    assert fast.queue.get_nowait() == {"id": "second"}


def test_unsubscribe_removes_subscription():
    bus = NotificationBus()
    team_id, user_id = uuid4(), uuid4()
    subscription = bus.subscribe(team_id, user_id)

    bus.unsubscribe(subscription)
    bus.unsubscribe(subscription)

    assert bus.subscriber_count(team_id, user_id) == 0
    assert bus.publish(team_id, user_id, {"id": "n1"}) == 0


@pytest.mark.asyncio
async def test_stream_emits_connected_notification_and_ping_then_unsubscribes():
    bus = NotificationBus()
    team_id, user_id = uuid4(), uuid4()
    stream = bus.stream(team_id, user_id, heartbeat_seconds=0.05)

    event, _ = parse(await stream.__anext__())
    assert event == "connected"
    assert bus.subscriber_count(team_id, user_id) == 1

    bus.publish(team_id, user_id, {"id": "n1"})
    event, data = parse(await stream.__anext__())
    assert (event, data) == ("notification", {"id": "n1"})

    event, _ = parse(await asyncio.wait_for(stream.__anext__(), timeout=1))
    assert event == "ping"

    await stream.aclose()
    assert bus.subscriber_count(team_id, user_id) == 0


@pytest.mark.asyncio
async def test_unstarted_stream_leaves_no_subscription():
    bus = NotificationBus()
    team_id, user_id = uuid4(), uuid4()
    stream = bus.stream(team_id, user_id)

    await stream.aclose()

    assert bus.subscriber_count(team_id, user_id) == 0
    assert bus.publish(team_id, user_id, {"id": "n1"}) == 0
