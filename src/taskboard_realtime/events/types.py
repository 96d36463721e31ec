"""Event type definitions for the realtime bus.

This module contains all Pydantic event models pushed to connected clients.
Known event kinds carry a typed payload; any other kind is represented by
``ExtensionEvent`` so new producers can publish without a schema change here.

On the wire every event is ``{"type": ..., "payload": ...}`` with camelCase
payload keys (``boardId``, ``taskId``, ``userId``), which is what the browser
client reads.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import to_json


class RealtimeEventType(StrEnum):
    """Known realtime event kinds."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    STATUS_CHANGED = "status_changed"
    BOARD_UPDATED = "board_updated"
    ACTIVITY_NEW = "activity_new"
    ARCHIVE_CHANGED = "archive_changed"
    NOTIFICATION_NEW = "notification_new"


EXTENSION_TAG = "extension"
_KNOWN_TAGS = frozenset(t.value for t in RealtimeEventType)


class EventPayload(BaseModel):
    """Base class for typed payloads (camelCase aliases on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TaskPayload(EventPayload):
    """Payload of task_created, task_updated and task_deleted."""

    board_id: str
    task_id: str


class StatusChangedPayload(EventPayload):
    """Payload of status_changed: a task moved to another column."""

    board_id: str
    task_id: str
    status: str


class BoardPayload(EventPayload):
    board_id: str


class ActivityPayload(EventPayload):
    """Payload of activity_new; ``type`` is the activity kind (e.g. ``comment_added``)."""

    type: str


class ArchiveChangedPayload(EventPayload):
    """Payload of archive_changed for a board, or a task on it when ``task_id`` is set."""

    board_id: str
    archived: bool
    task_id: str | None = None


class NotificationPayload(EventPayload):
    user_id: str


class BaseRealtimeEvent(BaseModel):
    """Common configuration of all realtime events.

    Events are immutable: the same instance is handed to every subscriber.
    """

    model_config = ConfigDict(frozen=True)


class TaskCreatedEvent(BaseRealtimeEvent):
    type: Literal["task_created"] = "task_created"
    payload: TaskPayload


class TaskUpdatedEvent(BaseRealtimeEvent):
    type: Literal["task_updated"] = "task_updated"
    payload: TaskPayload


class TaskDeletedEvent(BaseRealtimeEvent):
    type: Literal["task_deleted"] = "task_deleted"
    payload: TaskPayload


class StatusChangedEvent(BaseRealtimeEvent):
    type: Literal["status_changed"] = "status_changed"
    payload: StatusChangedPayload


class BoardUpdatedEvent(BaseRealtimeEvent):
    type: Literal["board_updated"] = "board_updated"
    payload: BoardPayload


class ActivityNewEvent(BaseRealtimeEvent):
    type: Literal["activity_new"] = "activity_new"
    payload: ActivityPayload


class ArchiveChangedEvent(BaseRealtimeEvent):
    type: Literal["archive_changed"] = "archive_changed"
    payload: ArchiveChangedPayload


class NotificationNewEvent(BaseRealtimeEvent):
    type: Literal["notification_new"] = "notification_new"
    payload: NotificationPayload


class ExtensionEvent(BaseRealtimeEvent):
    """Event of a kind not listed in ``RealtimeEventType``.

    The payload is opaque; interpreting it is up to the consumer.
    """

    type: str
    payload: Any = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Reject empty tags and tags that belong to a typed event."""
        if not v:
            raise ValueError("Extension event type must not be empty")
        if v in _KNOWN_TAGS:
            raise ValueError(f"'{v}' is a known event type, use its typed event model")
        return v


def _event_tag(value: Any) -> str:
    """Select the union member for raw input or an already built event."""
    tag = value.get("type") if isinstance(value, Mapping) else getattr(value, "type", None)
    return str(tag) if tag in _KNOWN_TAGS else EXTENSION_TAG


RealtimeEvent = Annotated[
    Annotated[TaskCreatedEvent, Tag("task_created")]
    | Annotated[TaskUpdatedEvent, Tag("task_updated")]
    | Annotated[TaskDeletedEvent, Tag("task_deleted")]
    | Annotated[StatusChangedEvent, Tag("status_changed")]
    | Annotated[BoardUpdatedEvent, Tag("board_updated")]
    | Annotated[ActivityNewEvent, Tag("activity_new")]
    | Annotated[ArchiveChangedEvent, Tag("archive_changed")]
    | Annotated[NotificationNewEvent, Tag("notification_new")]
    | Annotated[ExtensionEvent, Tag(EXTENSION_TAG)],
    Discriminator(_event_tag),
]

_event_adapter: TypeAdapter[RealtimeEvent] = TypeAdapter(RealtimeEvent)


def parse_event(data: Mapping[str, Any] | str | bytes) -> RealtimeEvent:
    """Validate raw event data into a typed event.

    Args:
        data: A mapping or a JSON document of the form ``{"type": ..., "payload": ...}``

    Returns:
        The typed event for a known kind, ``ExtensionEvent`` otherwise

    Raises:
        pydantic.ValidationError: If the data does not match the selected model
    """
    if isinstance(data, str | bytes):
        return _event_adapter.validate_json(data)
    return _event_adapter.validate_python(data)


def serialize_event(event: BaseModel | Mapping[str, Any]) -> str:
    """Render an event in its JSON wire format.

    Typed events use their camelCase aliases. Raw mappings are written out
    unchanged, so a producer that publishes a plain dict reaches clients with
    exactly the keys it published, payload or not.

    Raises:
        pydantic_core.PydanticSerializationError: If the event holds a value
            that has no JSON representation
    """
    if isinstance(event, BaseModel):
        return event.model_dump_json(by_alias=True)
    return to_json(event).decode()
