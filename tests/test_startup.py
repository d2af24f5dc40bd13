from __future__ import annotations

import httpx
import pytest

from m2x.api.client import M2XClient
from m2x.config import Settings
from m2x.startup import _wait_for_api


def _client(handler) -> M2XClient:
    return M2XClient("k", api_base="http://m2x.test/v1", transport=httpx.MockTransport(handler))


def test_wait_for_api_returns_once_status_answers() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 3:
            raise httpx.ConnectError("not yet", request=request)
        return httpx.Response(200, json={"api": "OK", "triggers": "OK"}, request=request)

    settings = Settings(_env_file=None, max_retries=5, retry_interval=0)
    _wait_for_api(_client(handler), settings)
    assert len(attempts) == 3


def test_wait_for_api_exits_when_api_never_answers() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "Maintenance"}, request=request)

    settings = Settings(_env_file=None, max_retries=2, retry_interval=0)
    with pytest.raises(SystemExit) as excinfo:
        _wait_for_api(_client(handler), settings)
    assert excinfo.value.code == 1
