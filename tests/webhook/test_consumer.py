from __future__ import annotations

from fastapi.testclient import TestClient

from m2x.events import TriggerEvent
from m2x.webhook.consumer import create_consumer_app

DELIVERY = {
    "feed_id": "a65689ce7a9a69291c6ed2deda1affad",
    "stream": "temperature",
    "trigger_name": "foobar",
    "condition": ">",
    "threshold": "30",
    "value": 31.5,
    "at": "2014-01-11T16:14:14Z",
}


def test_health() -> None:
    client = TestClient(create_consumer_app())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_delivery_is_decoded_and_handed_to_callback() -> None:
    received: list[TriggerEvent] = []

    async def on_event(event: TriggerEvent) -> None:
        received.append(event)

    client = TestClient(create_consumer_app(on_event=on_event))
    response = client.post("/streamEvent", json=DELIVERY)

    assert response.status_code == 200
    assert response.json() == {"status": "received"}
    assert len(received) == 1
    assert received[0].feed_id == "a65689ce7a9a69291c6ed2deda1affad"
    assert received[0].get_float("value") == 31.5


def test_custom_path() -> None:
    client = TestClient(create_consumer_app(path="/hooks/m2x"))
    assert client.post("/hooks/m2x", json=DELIVERY).status_code == 200
    assert client.post("/streamEvent", json=DELIVERY).status_code == 404


def test_invalid_body_is_rejected() -> None:
    received: list[TriggerEvent] = []

    async def on_event(event: TriggerEvent) -> None:
        received.append(event)

    client = TestClient(create_consumer_app(on_event=on_event))
    assert client.post("/streamEvent", content=b"{not json").status_code == 400
    assert client.post("/streamEvent", json=[1, 2]).status_code == 400
    assert received == []
