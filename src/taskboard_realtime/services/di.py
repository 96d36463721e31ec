"""Dependency injection setup module.

This module provides centralized service registration for the FastAPI
application lifespan and for tests that build their own registry.
"""

from loguru import logger

from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.services.publisher import RealtimePublisher
from taskboard_realtime.services.registry import ServiceRegistry
from taskboard_realtime.settings import Settings, get_settings


def register_core_services(registry: ServiceRegistry, settings: Settings | None = None) -> None:
    """Register core services in the service registry.

    Args:
        registry: Service registry instance to register services in
        settings: Settings to register; defaults to the cached ``get_settings()``
    """
    logger.debug("Registering core services in DI container")

    registry.register_singleton(Settings, settings or get_settings())


def register_realtime_services(registry: ServiceRegistry, bus: RealtimeBus) -> None:
    """Register the realtime bus and its producer facade.

    The bus is a singleton owned by the application lifespan. The publisher
    is a lightweight factory bound to that same bus.

    Args:
        registry: Service registry instance to register services in
        bus: The bus constructed at application start
    """
    logger.debug("Registering realtime services in DI container")

    registry.register_singleton(RealtimeBus, bus)
    registry.register_factory(RealtimePublisher, lambda: RealtimePublisher(bus))


def register_all_services(registry: ServiceRegistry, bus: RealtimeBus, settings: Settings | None = None) -> None:
    """Register all services in the service registry.

    Args:
        registry: Service registry instance to register services in
        bus: The application's realtime bus
        settings: Optional settings override
    """
    register_core_services(registry, settings)
    register_realtime_services(registry, bus)


def unregister_realtime_services(registry: ServiceRegistry) -> None:
    """Remove the realtime services registered by ``register_realtime_services``."""
    registry.unregister(RealtimePublisher)
    registry.unregister(RealtimeBus)
