"""Global exception handlers for the FastAPI application.

This module contains custom exception handlers that convert
application exceptions into proper HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from taskboard_realtime.event_bus import EventBusError


async def event_bus_exception_handler(request: Request, exc: EventBusError) -> JSONResponse:
    """Convert an event bus failure during a request into a 500 response."""
    logger.error(f"Event bus error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(EventBusError, event_bus_exception_handler)  # type: ignore[arg-type]
    logger.debug("Registered exception handlers")
