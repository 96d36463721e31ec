from taskboard_realtime.api.api_router import router as api_router  # noqa: F401
