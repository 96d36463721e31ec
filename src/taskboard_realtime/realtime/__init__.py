"""Realtime delivery of bus events to connected clients."""

from taskboard_realtime.realtime.stream import RealtimeStream, heartbeat_message

__all__ = ["RealtimeStream", "heartbeat_message"]
