from __future__ import annotations

import httpx
import pytest

from m2x.config import Settings
from m2x.webhook.registry import TriggerRegistry

FEED = "/feeds/abc"
CALLBACK = "http://receiver.test/streamEvent"


def _settings(**overrides) -> Settings:
    values = {
        "m2x_api_key": "k",
        "trigger_feed": FEED,
        "trigger_stream": "temperature",
        "trigger_name": "too-hot",
        "trigger_condition": ">",
        "trigger_value": "30",
        "trigger_callback_url": CALLBACK,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_signup_replaces_stale_triggers(client, recorder) -> None:
    recorder.add(
        "GET",
        "/feeds/abc/triggers",
        200,
        {
            "triggers": [
                {"id": "old", "callback_url": CALLBACK},
                {"id": "other", "callback_url": "http://elsewhere.test"},
            ]
        },
    )
    recorder.add("DELETE", "/feeds/abc/triggers/old", 204)
    recorder.add(
        "POST",
        "/feeds/abc/triggers",
        201,
        {"id": "new", "name": "too-hot", "stream": "temperature", "callback_url": CALLBACK},
    )

    trigger = TriggerRegistry(client, _settings()).signup()

    assert trigger.id == "new"
    assert [(r.method, r.url.path) for r in recorder.requests] == [
        ("GET", "/v1/feeds/abc/triggers"),
        ("DELETE", "/v1/feeds/abc/triggers/old"),
        ("POST", "/v1/feeds/abc/triggers"),
    ]
    assert recorder.sent_json() == {
        "name": "too-hot",
        "stream": "temperature",
        "condition": ">",
        "value": "30",
        "callback_url": CALLBACK,
        "status": "enabled",
    }


def test_signup_creates_stream_when_unit_configured(client, recorder) -> None:
    recorder.add("PUT", "/feeds/abc/streams/temperature", 201)
    recorder.add("GET", "/feeds/abc/triggers", 200, {"triggers": []})
    recorder.add("POST", "/feeds/abc/triggers", 201, {"id": "new"})

    settings = _settings(trigger_stream_unit_label="celsius", trigger_stream_unit_symbol="C")
    TriggerRegistry(client, settings).signup()

    assert recorder.requests[0].method == "PUT"
    assert recorder.sent_json(0) == {"unit": {"label": "celsius", "symbol": "C"}}


def test_cleanup_failure_does_not_block_registration(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(500, content=b"boom", request=request)
        return httpx.Response(201, json={"id": "new"}, request=request)

    trigger = TriggerRegistry(make_client(handler), _settings()).signup()
    assert trigger.id == "new"


def test_signup_requires_feed(client) -> None:
    with pytest.raises(RuntimeError, match="TRIGGER_FEED"):
        TriggerRegistry(client, _settings(trigger_feed="")).signup()
