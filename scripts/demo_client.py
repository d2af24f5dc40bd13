"""Walk a blueprint through its lifecycle against the live M2X API.

Usage:
    M2X_API_KEY=<key> python scripts/demo_client.py
"""

import logging
import os
import sys

# Allow running from the repo root without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from m2x import M2XClient, M2XError

logger = logging.getLogger("demo_client")

API_KEY = os.environ.get("M2X_API_KEY", "")
CALLBACK_URL = os.environ.get("TRIGGER_CALLBACK_URL", "http://localhost:3000/streamEvent")

BLUEPRINT = {
    "name": "Python Blueprint",
    "description": "A blueprint for the Python lib for M2X",
    "visibility": "private",
}

VALUES = [
    {"at": "2013-09-09T19:15:00Z", "value": "32"},
    {"at": "2013-09-09T19:16:00Z", "value": "28"},
    {"at": "2013-09-09T19:17:00Z", "value": "25"},
    {"at": "2013-09-09T19:18:00Z", "value": "40"},
]


def run(client: M2XClient) -> None:
    blueprint = client.create_blueprint(BLUEPRINT)
    try:
        client.update_blueprint(
            blueprint.id,
            {**BLUEPRINT, "description": "A blueprint for the Python lib for AT&T M2X"},
        )

        client.update_feed_stream(
            blueprint.feed,
            "temperature",
            {"unit": {"label": "celsius", "symbol": "C"}},
        )

        client.update_feed_location(
            blueprint.feed,
            {
                "name": "Storage Room in Sevilla, Spain",
                "latitude": "37.383055",
                "longitude": "-5.996392",
                "elevation": "5",
            },
        )

        client.create_trigger(
            blueprint.feed,
            {
                "name": "high-temperature",
                "stream": "temperature",
                "condition": ">",
                "value": "30",
                "callback_url": CALLBACK_URL,
                "status": "enabled",
            },
        )

        client.post_feed_stream_values(blueprint.feed, "temperature", {"values": VALUES})
        stream = client.feed_stream(blueprint.feed, "temperature")
        logger.info("Stream %s now reads %s %s", stream.name, stream.value, stream.unit.symbol)
    finally:
        client.delete_blueprint(blueprint.id)


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    if not API_KEY:
        logger.critical("M2X_API_KEY is not set")
        sys.exit(1)

    try:
        run(M2XClient(API_KEY))
    except M2XError as exc:
        logger.critical("Demo failed: %s", exc)
        sys.exit(1)

    logger.info("Done.")


if __name__ == "__main__":
    main()
