"""Tests for the realtime publisher service."""

import pytest
from pydantic import ValidationError

from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events import (
    ActivityNewEvent,
    ArchiveChangedEvent,
    BoardUpdatedEvent,
    ExtensionEvent,
    NotificationNewEvent,
    StatusChangedEvent,
    TaskCreatedEvent,
    TaskDeletedEvent,
    TaskUpdatedEvent,
)
from taskboard_realtime.services.publisher import RealtimePublisher


@pytest.fixture
def bus() -> RealtimeBus:
    return RealtimeBus()


@pytest.fixture
def received(bus: RealtimeBus) -> list:
    events: list = []
    bus.subscribe(events.append)
    return events


@pytest.fixture
def publisher(bus: RealtimeBus) -> RealtimePublisher:
    return RealtimePublisher(bus)


def test_task_events(publisher: RealtimePublisher, received: list):
    created = publisher.task_created("b1", "t1")
    updated = publisher.task_updated("b1", "t1")
    deleted = publisher.task_deleted("b1", "t1")

    assert received == [created, updated, deleted]
    assert isinstance(created, TaskCreatedEvent)
    assert isinstance(updated, TaskUpdatedEvent)
    assert isinstance(deleted, TaskDeletedEvent)
    assert created.payload.board_id == "b1"
    assert deleted.payload.task_id == "t1"


def test_status_changed(publisher: RealtimePublisher, received: list):
    event = publisher.status_changed("b1", "t1", "in_progress")
    assert received == [event]
    assert isinstance(event, StatusChangedEvent)
    assert event.payload.status == "in_progress"


def test_board_updated(publisher: RealtimePublisher, received: list):
    event = publisher.board_updated("b1")
    assert isinstance(event, BoardUpdatedEvent)
    assert received[0].payload.board_id == "b1"


def test_board_deleted_is_extension(publisher: RealtimePublisher, received: list):
    event = publisher.board_deleted("b1")
    assert isinstance(event, ExtensionEvent)
    assert event.type == "board_deleted"
    assert event.payload == {"boardId": "b1"}
    assert received == [event]


def test_activity_new(publisher: RealtimePublisher, received: list):
    event = publisher.activity_new("comment_added")
    assert isinstance(event, ActivityNewEvent)
    assert event.payload.type == "comment_added"


def test_archive_changed(publisher: RealtimePublisher, received: list):
    board = publisher.archive_changed("b1", archived=True)
    task = publisher.archive_changed("b1", archived=False, task_id="t1")

    assert isinstance(board, ArchiveChangedEvent)
    assert board.payload.task_id is None
    assert task.payload.task_id == "t1"
    assert task.payload.archived is False
    assert received == [board, task]


def test_notification_new(publisher: RealtimePublisher, received: list):
    event = publisher.notification_new("u1")
    assert isinstance(event, NotificationNewEvent)
    assert event.payload.user_id == "u1"


def test_custom_event(publisher: RealtimePublisher, received: list):
    event = publisher.custom("board_created", {"boardId": "b2"})
    assert received == [event]
    assert event.type == "board_created"


def test_custom_event_rejects_known_type(publisher: RealtimePublisher, received: list):
    with pytest.raises(ValidationError):
        publisher.custom("task_created", {"boardId": "b1"})
    assert received == []


def test_publish_without_subscribers(publisher: RealtimePublisher):
    """Producers never fail because nobody is listening."""
    event = publisher.task_created("b1", "t1")
    assert event.type == "task_created"


def test_failing_consumer_does_not_reach_producer(bus: RealtimeBus, publisher: RealtimePublisher):
    def broken(_event) -> None:
        raise ConnectionError("client went away")

    bus.subscribe(broken)
    event = publisher.notification_new("u1")
    assert event.payload.user_id == "u1"
