"""Realtime Event Bus for Decoupled Producer/Consumer Communication.

This module provides the in-process bus that connects the business logic
mutating tasks and boards (producers) with the per-client streams pushing
updates to browsers (consumers). It supports:

- **Synchronous Delivery**: Handlers are invoked in registration order
- **Cancellation Handles**: Every subscription is revoked by its own cancel function
- **Error Isolation**: Handler failures don't affect other handlers
- **Explicit Lifecycle**: The bus is constructed at startup and injected, not looked up globally

## Quick Start

```python
from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events import NotificationNewEvent, NotificationPayload

bus = RealtimeBus()
cancel = bus.subscribe(lambda event: print(event.payload.user_id))
bus.publish(NotificationNewEvent(payload=NotificationPayload(user_id="u1")))
cancel()
```

The bus serves a single process. Fan-out across processes would need a
broker behind the same ``publish``/``subscribe`` pair.

For exceptions and handler signatures, see `core.py`.
For the implementation, see `bus.py`.

"""

from .bus import RealtimeBus
from .core import CancelFn, EventBusError, EventCallback, HandlerRegistrationError

__all__ = [
    "CancelFn",
    "EventBusError",
    "EventCallback",
    "HandlerRegistrationError",
    "RealtimeBus",
]
