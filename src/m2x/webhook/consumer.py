"""FastAPI-based HTTP server that receives trigger events from M2X."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, status

from m2x.events import KNOWN_FIELDS, TriggerEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[TriggerEvent], Awaitable[None]]


def create_consumer_app(
    *,
    path: str = "/streamEvent",
    on_event: EventHandler | None = None,
) -> FastAPI:
    """Build and return a :class:`FastAPI` application for trigger callbacks.

    Parameters
    ----------
    path:
        Route the trigger's ``callback_url`` points to.
    on_event:
        Optional coroutine called with every decoded :class:`TriggerEvent`.
    """
    app = FastAPI(title="M2X Trigger Receiver")

    app.state.on_event = on_event

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok"}

    @app.post(path)
    async def receive_event(request: Request) -> dict[str, str]:
        """Handle one trigger delivery."""
        raw_body = await request.body()

        try:
            event = TriggerEvent.parse(raw_body)
        except ValueError:
            logger.warning("Rejected trigger delivery: body is not a JSON object")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid JSON body",
            )

        _log_event(event)

        handler: EventHandler | None = request.app.state.on_event
        if handler is not None:
            await handler(event)

        return {"status": "received"}

    return app


def _log_event(event: TriggerEvent) -> None:
    """Pretty-print a received trigger event to the log."""
    missing = [name for name in KNOWN_FIELDS if name not in event]
    if missing:
        logger.debug("Trigger event lacks fields: %s", ", ".join(missing))
    logger.info(
        "Received trigger event!\n%s",
        json.dumps(event.to_dict(), indent=4, default=str),
    )
