"""Tests for the per-client realtime stream."""

import asyncio
import json

import pytest

from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events import BoardPayload, BoardUpdatedEvent, ExtensionEvent, TaskCreatedEvent, TaskPayload
from taskboard_realtime.realtime import RealtimeStream, heartbeat_message


def make_task_created(task_id: str = "t1") -> TaskCreatedEvent:
    return TaskCreatedEvent(payload=TaskPayload(board_id="b1", task_id=task_id))


async def next_message(messages, timeout: float = 1.0):
    return await asyncio.wait_for(anext(messages), timeout)


def test_heartbeat_message():
    assert heartbeat_message().comment == "heartbeat"


def test_stream_not_subscribed_before_start():
    bus = RealtimeBus()
    RealtimeStream(bus)
    assert bus.subscriber_count == 0


@pytest.mark.asyncio
async def test_stream_connects_and_subscribes():
    bus = RealtimeBus()
    stream = RealtimeStream(bus)
    messages = stream.events()

    first = await next_message(messages)

    assert first.comment == "connected"
    assert bus.subscriber_count == 1

    await messages.aclose()
    assert bus.subscriber_count == 0
    assert stream.closed


@pytest.mark.asyncio
async def test_stream_forwards_events_as_json():
    bus = RealtimeBus()
    messages = RealtimeStream(bus).events()
    await next_message(messages)

    bus.publish(make_task_created("t1"))
    bus.publish(BoardUpdatedEvent(payload=BoardPayload(board_id="b1")))

    first = await next_message(messages)
    second = await next_message(messages)

    assert json.loads(first.data) == {"type": "task_created", "payload": {"boardId": "b1", "taskId": "t1"}}
    assert json.loads(second.data) == {"type": "board_updated", "payload": {"boardId": "b1"}}
    assert first.event is None  # unnamed, so browser onmessage handlers see it

    await messages.aclose()


@pytest.mark.asyncio
async def test_stream_receives_events_published_from_thread():
    bus = RealtimeBus()
    messages = RealtimeStream(bus).events()
    await next_message(messages)

    await asyncio.to_thread(bus.publish, make_task_created("from-thread"))

    message = await next_message(messages)
    assert json.loads(message.data)["payload"]["taskId"] == "from-thread"

    await messages.aclose()


@pytest.mark.asyncio
async def test_each_stream_gets_every_event():
    bus = RealtimeBus()
    first = RealtimeStream(bus).events()
    second = RealtimeStream(bus).events()
    await next_message(first)
    await next_message(second)
    assert bus.subscriber_count == 2

    bus.publish(make_task_created())

    assert json.loads((await next_message(first)).data)["type"] == "task_created"
    assert json.loads((await next_message(second)).data)["type"] == "task_created"

    await first.aclose()
    assert bus.subscriber_count == 1
    await second.aclose()
    assert bus.subscriber_count == 0


@pytest.mark.asyncio
async def test_stream_drops_events_when_queue_full():
    bus = RealtimeBus()
    stream = RealtimeStream(bus, queue_size=2)
    messages = stream.events()
    await next_message(messages)

    for i in range(3):
        bus.publish(make_task_created(str(i)))
    # Let the scheduled enqueue callbacks run
    await asyncio.sleep(0)

    assert stream.dropped == 1
    assert json.loads((await next_message(messages)).data)["payload"]["taskId"] == "0"
    assert json.loads((await next_message(messages)).data)["payload"]["taskId"] == "1"
    assert stream.delivered == 2

    await messages.aclose()


@pytest.mark.asyncio
async def test_stream_forwards_raw_events_as_published():
    bus = RealtimeBus()
    messages = RealtimeStream(bus).events()
    await next_message(messages)

    bus.publish({"type": "board_updated"})
    bus.publish({"type": "task_created", "payload": {"boardId": "b1", "taskId": "t1", "title": "x"}})
    bus.publish({"type": "task_created", "payload": {}})

    assert json.loads((await next_message(messages)).data) == {"type": "board_updated"}
    assert json.loads((await next_message(messages)).data) == {
        "type": "task_created",
        "payload": {"boardId": "b1", "taskId": "t1", "title": "x"},
    }
    assert json.loads((await next_message(messages)).data) == {"type": "task_created", "payload": {}}

    await messages.aclose()


@pytest.mark.asyncio
async def test_stream_skips_events_that_cannot_be_encoded():
    bus = RealtimeBus()
    stream = RealtimeStream(bus)
    messages = stream.events()
    await next_message(messages)

    bus.publish(ExtensionEvent(type="x", payload={"k": object()}))
    bus.publish({"type": "board_deleted", "payload": {"boardId": object()}})
    bus.publish(make_task_created("after"))

    message = await next_message(messages)
    assert json.loads(message.data)["payload"]["taskId"] == "after"
    assert stream.delivered == 1
    assert not stream.closed

    await messages.aclose()


@pytest.mark.asyncio
async def test_close_ends_stream():
    bus = RealtimeBus()
    stream = RealtimeStream(bus)
    messages = stream.events()
    await next_message(messages)

    bus.publish(make_task_created())
    await next_message(messages)

    stream.close()
    stream.close()
    assert bus.subscriber_count == 0

    with pytest.raises(StopAsyncIteration):
        await next_message(messages)


@pytest.mark.asyncio
async def test_cancelled_consumer_unsubscribes():
    """Cancelling the task reading the stream (client disconnect) cancels the subscription."""
    bus = RealtimeBus()
    messages = RealtimeStream(bus).events()
    await next_message(messages)

    async def read():
        return await anext(messages)

    reader = asyncio.create_task(read())
    await asyncio.sleep(0)
    reader.cancel()
    with pytest.raises(asyncio.CancelledError):
        await reader

    assert bus.subscriber_count == 0


@pytest.mark.asyncio
async def test_events_after_close_are_not_delivered():
    bus = RealtimeBus()
    stream = RealtimeStream(bus)
    messages = stream.events()
    await next_message(messages)
    await messages.aclose()

    bus.publish(make_task_created())
    assert stream.delivered == 0
