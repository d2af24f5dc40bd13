"""Low-level HTTP transport for the M2X REST API."""

from __future__ import annotations

import logging
from typing import NamedTuple

import httpx

from m2x import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"m2x-python/{__version__} (httpx)"
API_KEY_HEADER = "X-M2X-KEY"

METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class RequestOutcome(NamedTuple):
    """Result of a single HTTP exchange.

    ``error`` is set (and ``status_code`` is ``0``) only when no response
    was received at all.
    """

    body: bytes
    status_code: int
    error: Exception | None = None


def build_headers(api_key: str) -> dict[str, str]:
    """Return the headers sent with every M2X request."""
    return {
        "User-Agent": USER_AGENT,
        API_KEY_HEADER: api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


class Transport:
    """Thin wrapper around *httpx* that never raises for HTTP outcomes.

    Parameters
    ----------
    api_key:
        Key sent in the ``X-M2X-KEY`` header of every request.
    transport:
        Optional *httpx* transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        api_key: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._transport = transport

    def execute(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> RequestOutcome:
        """Send one request and return its :class:`RequestOutcome`.

        Caller supplied *headers* are sent too, but the reserved ones from
        :func:`build_headers` always win.
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        reserved = build_headers(self._api_key)
        reserved_names = {name.lower() for name in reserved}
        merged = {
            name: value
            for name, value in (headers or {}).items()
            if name.lower() not in reserved_names
        }
        merged.update(reserved)

        logger.debug("%s %s", method, url)

        try:
            with httpx.Client(transport=self._transport) as client:
                response = client.request(method, url, content=body, headers=merged)
                content = response.read()
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            return RequestOutcome(b"", 0, exc)

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return RequestOutcome(content, response.status_code, None)
