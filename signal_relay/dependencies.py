"""FastAPI dependency injection functions.

Provides:
- ``get_hub(request)``: Returns the process-wide ``SignalingHub``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from signal_relay.services.lifecycle import SignalingHub


def get_hub(request: Request) -> SignalingHub:
    """Return the hub created in the application lifespan.

    Raises ``HTTPException(503)`` if the lifespan has not run yet.
    """
    hub = getattr(request.app.state, "hub", None)
    if hub is None:
        raise HTTPException(status_code=503, detail="Signaling hub unavailable")
    return hub
