"""Service for announcing task-board changes to connected clients."""

from typing import Any

from loguru import logger

from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events.types import (
    ActivityNewEvent,
    ActivityPayload,
    ArchiveChangedEvent,
    ArchiveChangedPayload,
    BoardPayload,
    BoardUpdatedEvent,
    ExtensionEvent,
    NotificationNewEvent,
    NotificationPayload,
    StatusChangedEvent,
    StatusChangedPayload,
    TaskCreatedEvent,
    TaskDeletedEvent,
    TaskPayload,
    TaskUpdatedEvent,
)


class RealtimePublisher:
    """Producer-side facade over the realtime bus.

    Business logic calls one of these methods after a mutation has been
    committed. The payload carries the identifiers a client needs to refresh
    its view. Publishing never raises into the caller.
    """

    def __init__(self, bus: RealtimeBus):
        """Initialize the publisher.

        Args:
            bus: Realtime bus the events are published on
        """
        self.bus = bus

    def task_created(self, board_id: str, task_id: str) -> TaskCreatedEvent:
        """Announce a new task on a board."""
        event = TaskCreatedEvent(payload=TaskPayload(board_id=board_id, task_id=task_id))
        self.bus.publish(event)
        return event

    def task_updated(self, board_id: str, task_id: str) -> TaskUpdatedEvent:
        """Announce an edited task."""
        event = TaskUpdatedEvent(payload=TaskPayload(board_id=board_id, task_id=task_id))
        self.bus.publish(event)
        return event

    def task_deleted(self, board_id: str, task_id: str) -> TaskDeletedEvent:
        """Announce a removed task."""
        event = TaskDeletedEvent(payload=TaskPayload(board_id=board_id, task_id=task_id))
        self.bus.publish(event)
        return event

    def status_changed(self, board_id: str, task_id: str, status: str) -> StatusChangedEvent:
        """Announce a task moved to another column.

        Args:
            board_id: Board the task belongs to
            task_id: The moved task
            status: The column (status) the task was moved to

        Returns:
            The published event
        """
        event = StatusChangedEvent(payload=StatusChangedPayload(board_id=board_id, task_id=task_id, status=status))
        self.bus.publish(event)
        return event

    def board_updated(self, board_id: str) -> BoardUpdatedEvent:
        """Announce a board change (rename, columns, archive, touch)."""
        event = BoardUpdatedEvent(payload=BoardPayload(board_id=board_id))
        self.bus.publish(event)
        return event

    def board_deleted(self, board_id: str) -> ExtensionEvent:
        """Announce a deleted board.

        Clients viewing the board switch away from it on this event.
        """
        return self.custom("board_deleted", {"boardId": board_id})

    def activity_new(self, activity_type: str) -> ActivityNewEvent:
        """Announce a new entry in the activity feed.

        Args:
            activity_type: Kind of activity recorded (e.g. ``task_created``, ``comment_added``)

        Returns:
            The published event
        """
        event = ActivityNewEvent(payload=ActivityPayload(type=activity_type))
        self.bus.publish(event)
        return event

    def archive_changed(self, board_id: str, archived: bool, task_id: str | None = None) -> ArchiveChangedEvent:
        """Announce a board or task moved to or from the archive."""
        event = ArchiveChangedEvent(payload=ArchiveChangedPayload(board_id=board_id, archived=archived, task_id=task_id))
        self.bus.publish(event)
        return event

    def notification_new(self, user_id: str) -> NotificationNewEvent:
        """Announce a new notification for a user (assignment, mention, ...)."""
        event = NotificationNewEvent(payload=NotificationPayload(user_id=user_id))
        self.bus.publish(event)
        return event

    def custom(self, event_type: str, payload: Any = None) -> ExtensionEvent:
        """Announce an event kind without a typed model.

        Args:
            event_type: Event tag, must not be one of the known kinds
            payload: Opaque payload forwarded to clients as-is

        Returns:
            The published event

        Raises:
            pydantic.ValidationError: If event_type is empty or a known kind
        """
        event = ExtensionEvent(type=event_type, payload=payload)
        logger.debug(f"Publishing extension event {event_type}")
        self.bus.publish(event)
        return event
