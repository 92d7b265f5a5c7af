"""Health check endpoint -- no auth required."""

from __future__ import annotations

from fastapi import APIRouter

from signal_relay.models import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe. Always healthy while the process is serving."""
    return HealthResponse(status="ok")
