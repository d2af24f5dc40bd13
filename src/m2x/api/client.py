"""High-level client for the M2X REST API.

Every public method maps to exactly one API call.  On success it returns
the decoded record (or ``None`` for calls without a response body); on any
failure it raises :class:`~m2x.errors.M2XError`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

import httpx
from pydantic import BaseModel

from m2x.api.operations import Operation, decode, encode, feed_id
from m2x.api.transport import Transport
from m2x.config import DEFAULT_API_BASE, Settings
from m2x.errors import M2XError
from m2x.models import (
    Batch,
    BatchList,
    Blueprint,
    BlueprintList,
    Feed,
    FeedList,
    Key,
    KeyList,
    Location,
    RequestLog,
    Status,
    Stream,
    Trigger,
    TriggerList,
    Values,
)

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]

# ── Endpoints ────────────────────────────────────────────────────────────

STATUS = Operation("GET", "/status", 200, Status)

LIST_BLUEPRINTS = Operation("GET", "/blueprints", 200, BlueprintList)
GET_BLUEPRINT = Operation("GET", "/blueprints/{id}", 200, Blueprint)
CREATE_BLUEPRINT = Operation("POST", "/blueprints", 201, Blueprint)
UPDATE_BLUEPRINT = Operation("PUT", "/blueprints/{id}", 204)
DELETE_BLUEPRINT = Operation("DELETE", "/blueprints/{id}", 204)

LIST_BATCHES = Operation("GET", "/batches", 200, BatchList)
GET_BATCH = Operation("GET", "/batches/{id}", 200, Batch)
CREATE_BATCH = Operation("POST", "/batches", 201, Batch)
UPDATE_BATCH = Operation("PUT", "/batches/{id}", 204)
DELETE_BATCH = Operation("DELETE", "/batches/{id}", 204)

LIST_KEYS = Operation("GET", "/keys", 200, KeyList)
GET_KEY = Operation("GET", "/keys/{key}", 200, Key)
CREATE_KEY = Operation("POST", "/keys", 201, Key)
UPDATE_KEY = Operation("PUT", "/keys/{key}", 204)
DELETE_KEY = Operation("DELETE", "/keys/{key}", 204)

LIST_FEEDS = Operation("GET", "/feeds", 200, FeedList)
GET_FEED = Operation("GET", "/feeds/{feed}", 200, Feed)
GET_LOCATION = Operation("GET", "/feeds/{feed}/location", 200, Location)
UPDATE_LOCATION = Operation("PUT", "/feeds/{feed}/location", 204)
GET_STREAM = Operation("GET", "/feeds/{feed}/streams/{name}", 200, Stream)
UPDATE_STREAM = Operation("PUT", "/feeds/{feed}/streams/{name}", 201)
GET_VALUES = Operation("GET", "/feeds/{feed}/streams/{name}/values", 200, Values)
POST_VALUES = Operation("POST", "/feeds/{feed}/streams/{name}/values", 204)
GET_LOG = Operation("GET", "/feeds/{feed}/log", 200, RequestLog)

LIST_TRIGGERS = Operation("GET", "/feeds/{feed}/triggers", 200, TriggerList)
GET_TRIGGER = Operation("GET", "/feeds/{feed}/triggers/{id}", 200, Trigger)
CREATE_TRIGGER = Operation("POST", "/feeds/{feed}/triggers", 201, Trigger)
UPDATE_TRIGGER = Operation("PUT", "/feeds/{feed}/triggers/{id}", 204)
DELETE_TRIGGER = Operation("DELETE", "/feeds/{feed}/triggers/{id}", 204)
TEST_TRIGGER = Operation("POST", "/feeds/{feed}/triggers/{name}/test", 204)


class M2XClient:
    """Client for the M2X API.

    Parameters
    ----------
    api_key:
        Key sent with every request made by this instance.
    api_base:
        API root, e.g. ``"http://api-m2x.att.com/v1"``.
    transport:
        Optional *httpx* transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        api_base = (api_base or "").strip()
        if not api_base:
            raise ValueError("Invalid API base URL: value is empty.")
        self._api_base = api_base.rstrip("/")
        self._transport = Transport(api_key, transport=transport)

    @property
    def api_base(self) -> str:
        return self._api_base

    # ── Factory ─────────────────────────────────────────────────────

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> M2XClient:
        """Build a client from application settings."""
        if not settings.m2x_api_key:
            raise RuntimeError(
                "M2X_API_KEY is not set. "
                "Put your M2X account key in the environment or the .env file."
            )
        return cls(settings.m2x_api_key, api_base=settings.m2x_api_base, transport=transport)

    # ── Pipeline ────────────────────────────────────────────────────

    def _call(self, op: Operation, payload: Payload | None = None, **params: str) -> Any:
        body = encode(payload) if payload is not None else None
        url = f"{self._api_base}{op.build_path(**params)}"

        outcome = self._transport.execute(op.method, url, body)
        if outcome.error is not None:
            raise M2XError.from_transport_error(outcome.error, outcome.status_code)

        if outcome.status_code != op.expected_status:
            error = M2XError.from_response(outcome.body, outcome.status_code)
            logger.info("%s %s rejected: %s", op.method, url, error)
            raise error

        if op.model is None:
            return None
        return decode(op.model, outcome.body, outcome.status_code)

    # ── Status ──────────────────────────────────────────────────────

    def status(self) -> Status:
        """Return the health of the API and of trigger processing."""
        return self._call(STATUS)

    # ── Blueprints ──────────────────────────────────────────────────

    def blueprints(self) -> BlueprintList:
        return self._call(LIST_BLUEPRINTS)

    def blueprint(self, blueprint_id: str) -> Blueprint:
        return self._call(GET_BLUEPRINT, id=blueprint_id)

    def create_blueprint(self, data: Payload) -> Blueprint:
        """Create a blueprint.

        *data* needs at least ``name`` and ``visibility``
        (``"public"`` or ``"private"``); ``description`` is optional.
        """
        blueprint = self._call(CREATE_BLUEPRINT, data)
        logger.info("Created blueprint %s", blueprint.id)
        return blueprint

    def update_blueprint(self, blueprint_id: str, data: Payload) -> None:
        self._call(UPDATE_BLUEPRINT, data, id=blueprint_id)

    def delete_blueprint(self, blueprint_id: str) -> None:
        self._call(DELETE_BLUEPRINT, id=blueprint_id)
        logger.info("Deleted blueprint %s", blueprint_id)

    # ── Batches ─────────────────────────────────────────────────────

    def batches(self) -> BatchList:
        return self._call(LIST_BATCHES)

    def batch(self, batch_id: str) -> Batch:
        return self._call(GET_BATCH, id=batch_id)

    def create_batch(self, data: Payload) -> Batch:
        batch = self._call(CREATE_BATCH, data)
        logger.info("Created batch %s", batch.id)
        return batch

    def update_batch(self, batch_id: str, data: Payload) -> None:
        self._call(UPDATE_BATCH, data, id=batch_id)

    def delete_batch(self, batch_id: str) -> None:
        self._call(DELETE_BATCH, id=batch_id)
        logger.info("Deleted batch %s", batch_id)

    # ── Keys ────────────────────────────────────────────────────────

    def keys(self) -> KeyList:
        return self._call(LIST_KEYS)

    def key(self, key: str) -> Key:
        return self._call(GET_KEY, key=key)

    def create_key(self, data: Payload) -> Key:
        """Create an access key.

        *data* carries ``name`` and ``permissions`` (e.g. ``["GET", "PUT"]``)
        and may scope the key with ``feed`` / ``stream`` / ``expires_at``.
        """
        key = self._call(CREATE_KEY, data)
        logger.info("Created key %r", key.name)
        return key

    def update_key(self, key: str, data: Payload) -> None:
        self._call(UPDATE_KEY, data, key=key)

    def delete_key(self, key: str) -> None:
        self._call(DELETE_KEY, key=key)

    # ── Feeds ───────────────────────────────────────────────────────

    def feeds(self) -> FeedList:
        return self._call(LIST_FEEDS)

    def feed(self, feed: str) -> Feed:
        """Fetch a feed by id or by its ``/feeds/<id>`` locator."""
        return self._call(GET_FEED, feed=feed_id(feed))

    def feed_location(self, feed: str) -> Location:
        return self._call(GET_LOCATION, feed=feed_id(feed))

    def update_feed_location(self, feed: str, data: Payload) -> None:
        """Create or replace the location of a feed.

        *data* holds ``name``, ``latitude``, ``longitude`` and ``elevation``.
        """
        self._call(UPDATE_LOCATION, data, feed=feed_id(feed))

    def feed_stream(self, feed: str, name: str) -> Stream:
        return self._call(GET_STREAM, feed=feed_id(feed), name=name)

    def update_feed_stream(self, feed: str, name: str, data: Payload) -> None:
        """Create or update a stream, e.g. ``{"unit": {"label": "celsius", "symbol": "C"}}``."""
        self._call(UPDATE_STREAM, data, feed=feed_id(feed), name=name)

    def feed_stream_values(self, feed: str, name: str) -> Values:
        return self._call(GET_VALUES, feed=feed_id(feed), name=name)

    def post_feed_stream_values(self, feed: str, name: str, data: Payload) -> None:
        """Append values to a stream.

        *data* is ``{"values": [{"at": <ISO 8601>, "value": ...}, ...]}``.
        """
        self._call(POST_VALUES, data, feed=feed_id(feed), name=name)

    def request_log(self, feed: str) -> RequestLog:
        return self._call(GET_LOG, feed=feed_id(feed))

    # ── Triggers ────────────────────────────────────────────────────

    def triggers(self, feed: str) -> TriggerList:
        return self._call(LIST_TRIGGERS, feed=feed_id(feed))

    def trigger(self, feed: str, trigger_id: str) -> Trigger:
        return self._call(GET_TRIGGER, feed=feed_id(feed), id=trigger_id)

    def create_trigger(self, feed: str, data: Payload) -> Trigger:
        """Create a trigger on one of the feed's streams.

        *data* carries ``name``, ``stream``, ``condition`` (``<``, ``<=``,
        ``=``, ``>``, ``>=``), ``value``, ``callback_url`` and ``status``.
        """
        trigger = self._call(CREATE_TRIGGER, data, feed=feed_id(feed))
        logger.info("Created trigger %s on feed %s", trigger.id, feed)
        return trigger

    def update_trigger(self, feed: str, trigger_id: str, data: Payload) -> None:
        self._call(UPDATE_TRIGGER, data, feed=feed_id(feed), id=trigger_id)

    def delete_trigger(self, feed: str, trigger_id: str) -> None:
        self._call(DELETE_TRIGGER, feed=feed_id(feed), id=trigger_id)
        logger.info("Deleted trigger %s on feed %s", trigger_id, feed)

    def test_trigger(self, feed: str, name: str) -> None:
        """Ask the service to fire a trigger's callback once."""
        self._call(TEST_TRIGGER, feed=feed_id(feed), name=name)
