"""Server-side event handlers.

This module contains handlers that react to realtime events inside the
server process itself, next to the client streams.
"""

from typing import Any

from loguru import logger
from pydantic import BaseModel


class EventLogHandler:
    """Handler that writes every published event to the log.

    Registered at startup when ``log_events`` is enabled; useful to trace what
    producers announce without attaching a browser.
    """

    def __init__(self, level: str = "DEBUG"):
        self.level = level
        self.count = 0

    def __call__(self, event: Any) -> None:
        """Log the event type and payload.

        Args:
            event: The published event
        """
        self.count += 1
        event_type = getattr(event, "type", type(event).__name__)
        payload = getattr(event, "payload", event)
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True)
        logger.log(self.level, f"Realtime event #{self.count}: {event_type} {payload}")
