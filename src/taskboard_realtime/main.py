"""Main entry point for the realtime server using Typer and Pydantic Settings."""

import typer
import uvicorn
from loguru import logger

from taskboard_realtime.logging import setup_logging
from taskboard_realtime.settings import get_settings

app = typer.Typer(
    name="taskboard-realtime",
    help="Task board realtime server",
    no_args_is_help=True,
)


@app.callback()
def main_callback():
    """Task board realtime server."""


HOST_OPTION = typer.Option(
    None,
    help="Host to bind the server to (overrides TASKBOARD_HOST)",
    metavar="<server>",
)  # fmt: skip
PORT_OPTION = typer.Option(
    None,
    help="Port to bind the server to (overrides TASKBOARD_PORT)",
    metavar="<port>",
)  # fmt: skip
RELOAD_OPTION = typer.Option(
    None,
    help="Enable/disable auto-reload (overrides TASKBOARD_RELOAD)",
)  # fmt: skip
LOG_LEVEL_OPTION = typer.Option(
    None,
    help="Log level (overrides TASKBOARD_LOG_LEVEL)",
    metavar="<level>",
    case_sensitive=False,
)  # fmt: skip
HEARTBEAT_OPTION = typer.Option(
    None,
    help="Seconds between heartbeats on idle event streams (overrides TASKBOARD_HEARTBEAT_INTERVAL)",
    metavar="<seconds>",
)  # fmt: skip


def _update_settings(
    host: str | None,
    port: int | None,
    log_level: str | None,
    reload: bool | None,
    heartbeat_interval: float | None,
) -> None:
    """Update settings with CLI overrides.

    Args:
        host: Host override
        port: Port override
        log_level: Log level override
        reload: Reload override
        heartbeat_interval: Heartbeat interval override
    """
    settings = get_settings()

    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if log_level is not None:
        settings.log_level = log_level.upper()
    if reload is not None:
        settings.reload = reload
    if heartbeat_interval is not None:
        if heartbeat_interval <= 0:
            raise typer.BadParameter("Heartbeat interval must be positive", param_hint="--heartbeat-interval")
        settings.heartbeat_interval = heartbeat_interval


@app.command()
def run(
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    reload: bool = RELOAD_OPTION,
    heartbeat_interval: float = HEARTBEAT_OPTION,
) -> None:
    """Run the realtime server."""
    _update_settings(host, port, log_level, reload, heartbeat_interval)

    settings = get_settings()

    setup_logging(settings.log_level)

    logger.info(f"Starting realtime server on {settings.host}:{settings.port}")
    logger.info(f"Reload: {settings.reload}")

    # The realtime bus is in-process: run a single worker so every client sees every event
    if settings.reload:
        uvicorn.run(
            "taskboard_realtime.app:app",
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    else:
        from taskboard_realtime.app import app as fastapi_app

        uvicorn.run(
            fastapi_app,
            host=settings.host,
            port=settings.port,
            reload=False,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    app()
