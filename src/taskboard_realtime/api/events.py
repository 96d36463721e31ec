"""
Realtime events API - Server-Sent Events stream of task-board changes.

Each connected browser holds one long-lived ``GET /api/events`` request.
The stream starts with a ``connected`` comment, then carries one ``data:``
line per published event and a ``heartbeat`` comment whenever it has been
idle for ``heartbeat_interval`` seconds.
"""

from fastapi import APIRouter, Depends
from sse_starlette import EventSourceResponse

from taskboard_realtime.api.dependencies import service
from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.realtime import RealtimeStream, heartbeat_message
from taskboard_realtime.settings import Settings

router = APIRouter()

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "X-Accel-Buffering": "no",  # for nginx
}


@router.get("/events")
async def stream_events(
    bus: RealtimeBus = Depends(service(RealtimeBus)),
    settings: Settings = Depends(service(Settings)),
) -> EventSourceResponse:
    """Subscribe to realtime events.

    Args:
        bus: Application realtime bus
        settings: Application settings (heartbeat interval, queue size)

    Returns:
        EventSourceResponse streaming events until the client disconnects
    """
    stream = RealtimeStream(bus, queue_size=settings.stream_queue_size)
    return EventSourceResponse(
        stream.events(),
        headers=STREAM_HEADERS,
        ping=settings.heartbeat_interval,
        ping_message_factory=heartbeat_message,
    )
