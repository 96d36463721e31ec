"""Core Event Bus Components.

This module contains the fundamental abstractions shared by the realtime bus,
its producers and its consumers.

## Key Components

- **EventCallback**: Signature of a subscribed handler
- **CancelFn**: Signature of the cancellation handle returned by ``subscribe``
- **EventBusError**: Base exception for all event bus related errors
- **HandlerRegistrationError**: Raised when handler registration fails

## Usage Example

```python
from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events import TaskCreatedEvent, TaskPayload

bus = RealtimeBus()

def on_event(event) -> None:
    print(event.type, event.payload)

cancel = bus.subscribe(on_event)
bus.publish(TaskCreatedEvent(payload=TaskPayload(board_id="b1", task_id="t1")))
cancel()
```

"""

from collections.abc import Callable
from typing import Any

EventCallback = Callable[[Any], Any]
CancelFn = Callable[[], None]


class EventBusError(Exception):
    """Base exception for all event bus related errors.

    Use this for catching any event bus related error:
        ```python
        try:
            cancel = bus.subscribe(handler)
        except EventBusError as e:
            logger.error(f"Event bus error: {e}")
        ```
    """


class HandlerRegistrationError(EventBusError):
    """Raised when handler registration fails.

    This occurs when the handler passed to ``subscribe`` is not callable.
    """
