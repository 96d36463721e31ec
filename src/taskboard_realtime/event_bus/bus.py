"""Realtime Event Bus Implementation.

This module provides the ``RealtimeBus`` class that fans out domain events
(task, board, activity and notification changes) to the consumers connected
to this process.

## Key Features

- **Synchronous Fan-out**: ``publish`` invokes every handler in registration order
- **Cancellation Handles**: ``subscribe`` returns a zero-argument cancel function
- **Error Isolation**: A failing handler is logged and does not affect the others
- **Thread Safety**: Registrations are guarded by a lock, handlers run outside it
- **Injectable**: Constructed at application start and registered in the ServiceRegistry

Delivery is at-most-once: the bus is not a log, events published while
nobody is subscribed are dropped.

## Advanced Usage

```python
bus = RealtimeBus()

received = []
cancel_a = bus.subscribe(received.append)
cancel_b = bus.subscribe(lambda event: print(event.type))

bus.publish(BoardUpdatedEvent(payload=BoardPayload(board_id="b1")))

cancel_a()
cancel_a()  # no-op
```

"""

import threading
from typing import Any

from loguru import logger

from .core import CancelFn, EventCallback, HandlerRegistrationError


class _Subscription:
    """A single registration of a handler on the bus."""

    __slots__ = ("handler", "active")

    def __init__(self, handler: EventCallback) -> None:
        self.handler = handler
        self.active = True


class RealtimeBus:
    """In-process publish/subscribe bus for realtime events.

    Each call to ``subscribe`` creates an independent registration, so the
    same handler subscribed twice is invoked twice per event and each
    registration is removed by its own cancel function.

    Example:
        ```python
        bus = RealtimeBus()
        cancel = bus.subscribe(send_to_client)
        bus.publish(event)
        cancel()
        ```
    """

    def __init__(self) -> None:
        """Initialize a new RealtimeBus with no subscriptions."""
        self._subscriptions: list[_Subscription] = []
        self._lock = threading.Lock()
        logger.debug("RealtimeBus initialized")

    @property
    def subscriber_count(self) -> int:
        """Number of active registrations."""
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, handler: EventCallback) -> CancelFn:
        """Register a handler for all future events.

        Args:
            handler: Callable invoked with each published event

        Returns:
            A zero-argument function that removes exactly this registration.
            Calling it more than once is a no-op.

        Raises:
            HandlerRegistrationError: If handler is not callable
        """
        if not callable(handler):
            raise HandlerRegistrationError(f"Handler must be callable: {handler!r}")

        subscription = _Subscription(handler)
        with self._lock:
            self._subscriptions.append(subscription)
            count = len(self._subscriptions)
        logger.debug(f"Subscribed handler {handler} ({count} active)")

        def cancel() -> None:
            self._cancel(subscription)

        return cancel

    def _cancel(self, subscription: _Subscription) -> None:
        with self._lock:
            if not subscription.active:
                return
            subscription.active = False
            self._subscriptions.remove(subscription)
            count = len(self._subscriptions)
        logger.debug(f"Unsubscribed handler {subscription.handler} ({count} active)")

    def publish(self, event: Any) -> None:
        """Deliver an event to every current subscriber, in registration order.

        Handlers run synchronously on the caller's thread. A handler that
        raises is logged and skipped; the remaining handlers still receive
        the event and the exception never reaches the publisher.

        Args:
            event: The event to deliver, normally a ``RealtimeEvent``
        """
        with self._lock:
            subscriptions = list(self._subscriptions)

        event_type = getattr(event, "type", type(event).__name__)
        if not subscriptions:
            logger.trace(f"No subscribers for {event_type}, event dropped")
            return

        logger.debug(f"Publishing {event_type} to {len(subscriptions)} subscribers")

        failed = 0
        for subscription in subscriptions:
            # Cancelled by an earlier handler during this delivery
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                failed += 1
                logger.exception(f"Handler {subscription.handler} failed for {event_type}")

        if failed:
            logger.warning(f"Event {event_type}: {len(subscriptions) - failed} delivered, {failed} failed handlers")

    def shutdown(self) -> None:
        """Cancel every registration.

        Call this during application shutdown; consumers still holding a
        cancel function can call it safely afterwards.
        """
        with self._lock:
            for subscription in self._subscriptions:
                subscription.active = False
            count = len(self._subscriptions)
            self._subscriptions.clear()
        logger.debug(f"RealtimeBus shutdown complete ({count} subscriptions cancelled)")
