"""Service registry for dependency injection.

The realtime bus, the publisher and any other shared component are looked up
here by type, so route handlers and producers receive them through injection
instead of importing a module-level instance.
"""

from collections.abc import Callable
from functools import lru_cache
from typing import Any, TypeVar, cast

T = TypeVar("T")
ServiceFactory = Callable[[], T]
ServiceProvider = T | ServiceFactory[T]


class ServiceRegistry:
    """Registry for all shared services with support for singletons and factories."""

    def __init__(self):
        """Initialize an empty service registry."""
        self._services: dict[str, ServiceProvider[Any]] = {}
        self._singletons: set[str] = set()

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """Register a singleton instance by its type.

        Singletons are returned as-is even when the instance itself is
        callable (a bus or a handler object).

        Args:
            service_type: The type of the service to register
            instance: The singleton instance to register
        """
        self._services[service_type.__name__] = instance
        self._singletons.add(service_type.__name__)

    def register_factory(self, service_type: type[T], factory: ServiceFactory[T]) -> None:
        """Register a factory function by its type.

        Args:
            service_type: The type of the service to register
            factory: Zero-argument callable building an instance on each lookup
        """
        self._services[service_type.__name__] = factory
        self._singletons.discard(service_type.__name__)

    def unregister(self, service_type: type[T]) -> None:
        """Remove a service, if registered (used at application shutdown)."""
        self._services.pop(service_type.__name__, None)
        self._singletons.discard(service_type.__name__)

    def is_registered(self, service_type: type[T]) -> bool:
        return service_type.__name__ in self._services

    def get(self, service_type: type[T]) -> T:
        """Get a service instance by type.

        Args:
            service_type: The type of the service to retrieve

        Returns:
            An instance of the requested service

        Raises:
            KeyError: If the requested service is not registered
        """
        service_name = service_type.__name__

        if service_name not in self._services:
            raise KeyError(f"Service {service_name} not registered")

        provider = self._services[service_name]

        if service_name in self._singletons:
            return cast(T, provider)

        return cast(ServiceFactory[T], provider)()


@lru_cache
def get_service_registry() -> ServiceRegistry:
    """Get the application service registry.

    Returns:
        The process-wide service registry instance
    """
    return ServiceRegistry()
