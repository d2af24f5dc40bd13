"""Error normalization for M2X API calls.

Every failure in the request pipeline ends up as a single
:class:`M2XError` carrying a message, the HTTP status code (``0`` when no
response was received) and the underlying cause.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

__all__ = ["APIMessage", "M2XError", "parse_error_message"]


class APIMessage(Exception):
    """Cause attached to errors reported by the API in its response body."""


class M2XError(RuntimeError):
    """Raised when an M2X API call fails.

    Parameters
    ----------
    message:
        Human readable description (the API's ``message`` field when present).
    status_code:
        HTTP status code of the response, ``0`` for local or transport failures.
    errors:
        Per-field validation errors reported by the API (``{"name": [...]}``).
    cause:
        The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        errors: dict[str, list[str]] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code)
        self.errors = dict(errors or {})
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.message} (status={self.status_code})"

    # ── Constructors ────────────────────────────────────────────────

    @classmethod
    def from_transport_error(cls, exc: BaseException, status_code: int = 0) -> M2XError:
        """Build an error for a request that never produced a response."""
        message = str(exc) or type(exc).__name__
        return cls(message, status_code=status_code, cause=exc)

    @classmethod
    def from_encode_error(cls, exc: BaseException) -> M2XError:
        """Build an error for a payload that could not be serialised to JSON."""
        return cls(f"Could not encode request payload: {exc}", status_code=0, cause=exc)

    @classmethod
    def from_decode_error(cls, exc: BaseException, status_code: int) -> M2XError:
        """Build an error for a success response whose body did not decode."""
        return cls(str(exc), status_code=status_code, cause=exc)

    @classmethod
    def from_response(cls, body: bytes, status_code: int) -> M2XError:
        """Build an error from a non-success response body.

        The body is expected to look like ``{"message": "..."}``.  When it
        cannot be parsed the message is left empty but the status code is
        still recorded.
        """
        message = ""
        errors: dict[str, list[str]] = {}
        try:
            data = parse_error_message(body)
        except ValueError:
            logger.debug("Unstructured error body for status %d", status_code)
        else:
            message = data["message"]
            errors = data["errors"]
        return cls(message, status_code=status_code, errors=errors, cause=APIMessage(message))


def parse_error_message(body: bytes | str) -> dict[str, Any]:
    """Decode an API error body into ``{"message": str, "errors": dict}``.

    Raises
    ------
    ValueError
        If *body* is not a JSON object or ``message`` is not a string.
    """
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("Error body is not a JSON object")

    message = data.get("message", "")
    if message is None:
        message = ""
    if not isinstance(message, str):
        raise ValueError("Error message is not a string")

    errors: dict[str, list[str]] = {}
    raw_errors = data.get("errors")
    if isinstance(raw_errors, dict):
        for field, reasons in raw_errors.items():
            if isinstance(reasons, list):
                errors[str(field)] = [str(r) for r in reasons]
            elif reasons is not None:
                errors[str(field)] = [str(reasons)]

    return {"message": message, "errors": errors}
