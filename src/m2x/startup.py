"""Startup orchestrator: status check, trigger signup, then serve callbacks."""

from __future__ import annotations

import logging
import sys
import time

import uvicorn

from m2x.api.client import M2XClient
from m2x.config import Settings, get_settings
from m2x.errors import M2XError
from m2x.webhook.consumer import create_consumer_app
from m2x.webhook.registry import TriggerRegistry

logger = logging.getLogger(__name__)


def _wait_for_api(client: M2XClient, settings: Settings) -> None:
    """Block until ``GET /status`` answers."""
    logger.info("Waiting for M2X API at %s …", client.api_base)

    for attempt in range(1, settings.max_retries + 1):
        try:
            api_status = client.status()
            logger.info(
                "API is up (attempt %d): api=%s triggers=%s",
                attempt,
                api_status.api,
                api_status.triggers,
            )
            return
        except M2XError as exc:
            logger.debug("Attempt %d/%d - not ready yet: %s", attempt, settings.max_retries, exc)
            time.sleep(settings.retry_interval)

    logger.critical("API did not become ready in time. Exiting.")
    sys.exit(1)


def _setup_logging(level: str) -> None:
    """Configure root logger with a human-friendly format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    """Entry-point: wait for API, register the trigger, then serve."""
    settings = get_settings()
    _setup_logging(settings.log_level)

    logger.info("M2X trigger server starting …")

    try:
        client = M2XClient.from_settings(settings)
    except RuntimeError as exc:
        logger.critical("%s", exc)
        sys.exit(1)

    # 1. Wait for the M2X API
    _wait_for_api(client, settings)

    # 2. Point a trigger at our callback URL
    if settings.trigger_feed:
        registry = TriggerRegistry(client, settings)
        try:
            registry.signup()
        except M2XError as exc:
            logger.critical("Trigger signup failed (%s): %s", exc.status_code, exc.message)
            sys.exit(1)
    else:
        logger.info("TRIGGER_FEED not set; serving without registering a trigger")

    # 3. Serve callbacks
    app = create_consumer_app(path=settings.trigger_path)

    logger.info(
        "Starting trigger receiver on %s:%d%s",
        settings.trigger_host,
        settings.trigger_port,
        settings.trigger_path,
    )
    uvicorn.run(
        app,
        host=settings.trigger_host,
        port=settings.trigger_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
