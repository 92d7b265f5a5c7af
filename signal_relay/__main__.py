"""Run the relay under uvicorn: ``python -m signal_relay`` or ``signal-relay``."""

from __future__ import annotations

import logging

import uvicorn

from signal_relay.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Server running on port %d", settings.port)
    uvicorn.run(
        "signal_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
