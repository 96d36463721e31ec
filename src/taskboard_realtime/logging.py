"""Logging configuration for the realtime server."""

import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        # Get corresponding loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_level: str):
    """Configure loguru logging for the entire application.

    Args:
        log_level: Log level to use (from settings, which handles env vars and CLI args).
    """
    log_level = log_level.upper()

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        ),
        level=log_level,
        colorize=True,
    )

    logger.info(f"Log level set to: {log_level}")

    # Redirect all standard logging to loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # uvicorn and starlette configure their own handlers before we get here
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "starlette", "sse_starlette"):
        logging_logger = logging.getLogger(name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # stdlib logging has no TRACE level
    std_level = "DEBUG" if log_level == "TRACE" else log_level
    for noisy_logger in ("httpcore", "httpx", "asyncio", "sse_starlette"):
        logging.getLogger(noisy_logger).setLevel(std_level)

    # One access line per event stream connection is noise outside debugging
    if std_level != "DEBUG":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
