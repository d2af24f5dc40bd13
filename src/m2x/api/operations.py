"""Generic resource operation shared by every client method.

An :class:`Operation` names the verb, the path template, the status code
that means success and the model used to decode the response.  The client
instantiates one per API call instead of repeating the request/decode
boilerplate for each resource.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from m2x.errors import M2XError

__all__ = ["Operation", "decode", "encode", "feed_id"]

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Operation(Generic[T]):
    """One M2X endpoint.

    ``path`` is a :meth:`str.format` template; parameters are URL-quoted
    before substitution.  ``model`` is ``None`` for operations that return
    no body.
    """

    method: str
    path: str
    expected_status: int
    model: type[T] | None = None

    def build_path(self, **params: str) -> str:
        quoted = {name: quote(str(value), safe="") for name, value in params.items()}
        return self.path.format(**quoted)


def encode(payload: Mapping[str, Any] | BaseModel) -> bytes:
    """Serialise a request payload to JSON bytes.

    Raises
    ------
    M2XError
        With status ``0`` when the payload cannot be represented as JSON.
    """
    try:
        if isinstance(payload, BaseModel):
            data: Any = payload.model_dump(mode="json", exclude_unset=True)
        else:
            data = payload
        return json.dumps(data, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise M2XError.from_encode_error(exc) from exc


def decode(model: type[T], body: bytes, status_code: int) -> T:
    """Decode a success response body into *model*.

    Raises
    ------
    M2XError
        Carrying *status_code* when the body does not match the model.
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise M2XError.from_decode_error(exc, status_code) from exc


def feed_id(feed: str) -> str:
    """Return the id part of a feed reference.

    Accepts a bare id (``"1234"``) or the locator returned by the API
    (``"/feeds/1234"``).

    Raises
    ------
    M2XError
        With status ``0`` when the reference names no feed.
    """
    ref = feed.strip()
    prefix = "/feeds/"
    if ref.startswith(prefix):
        ref = ref[len(prefix):]
    ref = ref.strip("/")
    if not ref or ref == "feeds":
        raise M2XError(f"Invalid feed reference: {feed!r}", status_code=0)
    return ref
