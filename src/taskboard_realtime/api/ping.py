"""Ping API endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["System"])


class PingResponse(BaseModel):
    """Ping response model."""

    ping: str = "pong"


@router.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    """Liveness probe; does not touch the realtime bus."""
    return PingResponse()
