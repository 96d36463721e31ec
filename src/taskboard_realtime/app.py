"""Main FastAPI application module."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from taskboard_realtime import __version__
from taskboard_realtime.api import api_router
from taskboard_realtime.api.ping import router as ping_router
from taskboard_realtime.event_bus import RealtimeBus
from taskboard_realtime.events import register_event_handlers
from taskboard_realtime.exception_handlers import register_exception_handlers
from taskboard_realtime.logging import setup_logging
from taskboard_realtime.services.di import register_all_services, unregister_realtime_services
from taskboard_realtime.services.registry import get_service_registry
from taskboard_realtime.settings import Settings, get_settings


def _log_server_endpoints_summary(settings: Settings) -> None:
    """Log the server URL and the available endpoints.

    Args:
        settings: Application settings containing host and port
    """
    server_url = f"http://{settings.host}:{settings.port}"
    logger.info(f"Server running at: {server_url}")

    endpoints = [
        ("Ping", "/ping"),
        ("Realtime events (SSE)", "/api/events"),
        ("OpenAPI Schema", "/openapi.json"),
        ("API Docs", "/docs"),
    ]

    logger.info("Available endpoints:")
    for name, path in endpoints:
        logger.info(f"   {name}: {server_url}{path}")

    logger.info(f"Heartbeat interval: {settings.heartbeat_interval}s, stream queue size: {settings.stream_queue_size}")


@asynccontextmanager
async def app_lifespan(_app: FastAPI):
    """Build the realtime bus on startup and tear it down on shutdown."""
    settings = get_settings()
    _app.state.settings = settings  # type: ignore[attr-defined]

    setup_logging(log_level=settings.log_level)

    # The bus lives exactly as long as the application
    bus = RealtimeBus()
    _app.state.realtime_bus = bus  # type: ignore[attr-defined]

    logger.info("Registering services in the service registry")
    registry = get_service_registry()
    register_all_services(registry, bus, settings)
    handler_cancels = register_event_handlers(bus, log_events=settings.log_events)

    _log_server_endpoints_summary(settings)

    yield

    logger.info("Realtime server shutting down")

    for cancel in handler_cancels:
        cancel()
    bus.shutdown()
    unregister_realtime_services(registry)


app = FastAPI(
    lifespan=app_lifespan,
    title="Task board realtime server",
    description="Server-Sent Events stream of task, board and notification changes",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

global_settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=global_settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["Content-Type"],
)

register_exception_handlers(app)

app.include_router(ping_router, prefix="")
app.include_router(api_router, prefix="/api")
