"""Trigger registration against an M2X feed.

Points a feed trigger at our callback receiver: make sure the stream
exists, drop triggers left behind by earlier runs, then create a fresh
one.
"""

from __future__ import annotations

import logging

from m2x.api.client import M2XClient
from m2x.config import Settings
from m2x.errors import M2XError
from m2x.models import Trigger

logger = logging.getLogger(__name__)


class TriggerRegistry:
    """Sign up a feed trigger for callback delivery.

    The registry owns the signup lifecycle:

    1. **Stream** - create/update the watched stream when a unit is configured.
    2. **Cleanup** - remove triggers that already point to our callback URL.
    3. **Register** - create the trigger and return it.

    Parameters
    ----------
    client:
        ``M2XClient`` configured with an account key.
    settings:
        Settings holding the feed, stream, condition and callback URL.
    """

    def __init__(self, client: M2XClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    # ── Public API ──────────────────────────────────────────────────

    def signup(self) -> Trigger:
        """Run the full signup flow and return the created trigger."""
        if not self._settings.trigger_feed:
            raise RuntimeError("TRIGGER_FEED is not set; nothing to register.")
        self._ensure_stream()
        self._cleanup_old_triggers()
        return self._register()

    # ── Internal steps ──────────────────────────────────────────────

    def _ensure_stream(self) -> None:
        """Create the watched stream with its unit, if one is configured."""
        unit = self._settings.trigger_stream_unit
        if unit is None:
            return
        feed = self._settings.trigger_feed
        stream = self._settings.trigger_stream
        logger.info("Ensuring stream %s on feed %s", stream, feed)
        self._client.update_feed_stream(feed, stream, {"unit": unit})

    def _cleanup_old_triggers(self) -> None:
        """Delete any triggers on the feed that call back to our URL."""
        feed = self._settings.trigger_feed
        callback = self._settings.trigger_callback_url
        logger.info("Cleaning up old triggers pointing to %s", callback)

        try:
            for trigger in self._client.triggers(feed).triggers:
                if trigger.callback_url == callback:
                    logger.info("Deleting stale trigger %s", trigger.id)
                    self._client.delete_trigger(feed, trigger.id)
        except M2XError:
            logger.warning("Could not clean up old triggers", exc_info=True)

    def _register(self) -> Trigger:
        """Create the trigger on the configured stream."""
        s = self._settings
        logger.info(
            "Registering trigger %s: %s %s %s -> %s",
            s.trigger_name,
            s.trigger_stream,
            s.trigger_condition,
            s.trigger_value,
            s.trigger_callback_url,
        )

        trigger = self._client.create_trigger(
            s.trigger_feed,
            {
                "name": s.trigger_name,
                "stream": s.trigger_stream,
                "condition": s.trigger_condition,
                "value": s.trigger_value,
                "callback_url": s.trigger_callback_url,
                "status": "enabled",
            },
        )
        logger.info("Trigger registered  id=%s", trigger.id)
        return trigger
