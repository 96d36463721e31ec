"""Realtime events of the task board.

This module provides the event types announced by producers and the
server-side handlers registered on the bus at startup.
"""

from loguru import logger

from taskboard_realtime.event_bus import CancelFn, RealtimeBus
from taskboard_realtime.events.handlers import EventLogHandler
from taskboard_realtime.events.types import (
    ActivityNewEvent,
    ActivityPayload,
    ArchiveChangedEvent,
    ArchiveChangedPayload,
    BoardPayload,
    BoardUpdatedEvent,
    EventPayload,
    ExtensionEvent,
    NotificationNewEvent,
    NotificationPayload,
    RealtimeEvent,
    RealtimeEventType,
    StatusChangedEvent,
    StatusChangedPayload,
    TaskCreatedEvent,
    TaskDeletedEvent,
    TaskPayload,
    TaskUpdatedEvent,
    parse_event,
    serialize_event,
)

__all__ = [
    "ActivityNewEvent",
    "ActivityPayload",
    "ArchiveChangedEvent",
    "ArchiveChangedPayload",
    "BoardPayload",
    "BoardUpdatedEvent",
    "EventLogHandler",
    "EventPayload",
    "ExtensionEvent",
    "NotificationNewEvent",
    "NotificationPayload",
    "RealtimeEvent",
    "RealtimeEventType",
    "StatusChangedEvent",
    "StatusChangedPayload",
    "TaskCreatedEvent",
    "TaskDeletedEvent",
    "TaskPayload",
    "TaskUpdatedEvent",
    "parse_event",
    "register_event_handlers",
    "serialize_event",
]


def register_event_handlers(bus: RealtimeBus, log_events: bool = False) -> list[CancelFn]:
    """Register server-side event handlers on the bus.

    Args:
        bus: The application's realtime bus
        log_events: Subscribe an ``EventLogHandler`` that logs every event

    Returns:
        Cancel functions of the registered handlers
    """
    logger.debug("Registering event handlers on realtime bus")

    cancels: list[CancelFn] = []
    if log_events:
        cancels.append(bus.subscribe(EventLogHandler()))

    logger.info(f"Event handlers registered successfully ({len(cancels)} active)")
    return cancels
