from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from m2x.api.client import M2XClient

API_BASE = "http://m2x.test/v1"
API_KEY = "test-key"

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Routes requests by ``(method, path)`` and keeps every request seen."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int, body: Any = None) -> None:
        self.routes[(method, f"/v1{path}")] = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "No route"}, request=request)
        status_code, body = self.routes[key]
        if body is None:
            return httpx.Response(status_code, request=request)
        if isinstance(body, bytes):
            return httpx.Response(status_code, content=body, request=request)
        return httpx.Response(status_code, json=body, request=request)

    def sent_json(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder: Recorder) -> M2XClient:
    return M2XClient(API_KEY, api_base=API_BASE, transport=httpx.MockTransport(recorder))


@pytest.fixture
def make_client() -> Callable[[Handler], M2XClient]:
    def _make(handler: Handler, api_key: str = API_KEY) -> M2XClient:
        return M2XClient(api_key, api_base=API_BASE, transport=httpx.MockTransport(handler))

    return _make
