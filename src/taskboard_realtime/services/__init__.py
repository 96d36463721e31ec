"""Application services and the dependency injection registry."""

from taskboard_realtime.services.publisher import RealtimePublisher
from taskboard_realtime.services.registry import ServiceRegistry, get_service_registry

__all__ = ["RealtimePublisher", "ServiceRegistry", "get_service_registry"]
