"""Per-client realtime stream.

``RealtimeStream`` turns one client connection into a bus consumer: it
subscribes when the stream starts, forwards every event as a Server-Sent
Event and cancels its subscription when the client goes away.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Any

from loguru import logger
from pydantic_core import PydanticSerializationError
from sse_starlette import ServerSentEvent

from taskboard_realtime.event_bus import CancelFn, RealtimeBus
from taskboard_realtime.events.types import serialize_event

CONNECTED_COMMENT = "connected"
HEARTBEAT_COMMENT = "heartbeat"


def heartbeat_message() -> ServerSentEvent:
    """Comment line sent on idle streams to keep proxies from closing them."""
    return ServerSentEvent(comment=HEARTBEAT_COMMENT)


class RealtimeStream:
    """Bridge between the synchronous bus and one asynchronous client stream.

    The bus handler only schedules a put on the stream's event loop, so
    publishing from any thread is safe and never waits for the client. Events
    that arrive while the per-client queue is full are dropped for this client.
    """

    def __init__(self, bus: RealtimeBus, queue_size: int = 256):
        """Initialize the stream.

        Args:
            bus: Bus to subscribe to
            queue_size: Maximum number of undelivered events held for this client
        """
        self.bus = bus
        self.queue_size = queue_size
        self.delivered = 0
        self.dropped = 0
        self._cancel: CancelFn | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Cancel the bus subscription. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._cancel is not None:
            self._cancel()
            self._cancel = None
        logger.debug(f"Realtime stream closed ({self.delivered} delivered, {self.dropped} dropped)")

    async def events(self) -> AsyncIterator[ServerSentEvent]:
        """Yield the messages of this stream until it is closed or cancelled.

        The first message is a ``connected`` comment; the subscription is
        active once it has been produced. Every following message carries one
        event in its JSON wire format.
        """
        if self._closed:
            return

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.queue_size)

        def enqueue(event: Any) -> None:
            if self._closed:
                return
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                self.dropped += 1
                logger.warning(f"Realtime stream queue full, dropped {getattr(event, 'type', event)!r}")

        def on_event(event: Any) -> None:
            try:
                loop.call_soon_threadsafe(enqueue, event)
            except RuntimeError:
                # Event loop already closed: the connection is gone
                logger.debug("Realtime stream loop closed, cancelling subscription")
                self.close()

        self._cancel = self.bus.subscribe(on_event)
        logger.debug(f"Realtime stream opened ({self.bus.subscriber_count} subscribers)")

        try:
            yield ServerSentEvent(comment=CONNECTED_COMMENT)
            while not self._closed:
                event = await queue.get()
                try:
                    data = serialize_event(event)
                except PydanticSerializationError as e:
                    logger.warning(f"Skipping event that cannot be encoded as JSON: {e}")
                    continue
                self.delivered += 1
                yield ServerSentEvent(data=data)
        finally:
            self.close()
