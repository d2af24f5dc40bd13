"""Trigger events delivered to a trigger's callback URL.

The service is not consistent about field types across trigger kinds
(``value`` arrives as a number on some, as a string on others), so an
event is kept as a read-only mapping of JSON scalars.  Callers pick the
type they need through the ``get_*`` accessors, which raise
:class:`TriggerEventFieldError` when the field is absent or unusable.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any, Union

__all__ = ["EventValue", "TriggerEvent", "TriggerEventFieldError"]

EventValue = Union[str, int, float, bool, None]

# Fields every trigger delivery carries.
KNOWN_FIELDS = (
    "feed_id",
    "stream",
    "trigger_name",
    "trigger_description",
    "condition",
    "threshold",
    "value",
    "at",
)


class TriggerEventFieldError(LookupError):
    """Raised when a trigger event field is missing or has an unusable type."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class TriggerEvent(Mapping[str, EventValue]):
    """A decoded trigger delivery."""

    def __init__(self, fields: Mapping[str, Any]) -> None:
        data: dict[str, EventValue] = {}
        for name, value in fields.items():
            if value is None or isinstance(value, (str, int, float, bool)):
                data[str(name)] = value
            else:
                # Nested structures are kept in their JSON text form.
                data[str(name)] = json.dumps(value, sort_keys=True)
        self._data = data

    @classmethod
    def parse(cls, body: bytes | str) -> TriggerEvent:
        """Decode a JSON delivery body.

        Raises
        ------
        ValueError
            If *body* is not valid JSON or not a JSON object.
        """
        payload = json.loads(body)
        if not isinstance(payload, dict):
            raise ValueError("Trigger event body is not a JSON object")
        return cls(payload)

    # ── Mapping protocol ────────────────────────────────────────────

    def __getitem__(self, key: str) -> EventValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"TriggerEvent({self._data!r})"

    def to_dict(self) -> dict[str, EventValue]:
        return dict(self._data)

    # ── Typed extraction ────────────────────────────────────────────

    def _require(self, field: str) -> EventValue:
        if field not in self._data:
            raise TriggerEventFieldError(field, "missing")
        value = self._data[field]
        if value is None:
            raise TriggerEventFieldError(field, "null")
        return value

    def get_str(self, field: str) -> str:
        """Return *field* as text; numbers and booleans are rendered as JSON."""
        value = self._require(field)
        if isinstance(value, str):
            return value
        return json.dumps(value)

    def get_float(self, field: str) -> float:
        """Return *field* as a number, accepting numeric strings."""
        value = self._require(field)
        if isinstance(value, bool):
            raise TriggerEventFieldError(field, "expected a number, got a boolean")
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(value.strip())
        except ValueError:
            raise TriggerEventFieldError(field, f"not a number: {value!r}") from None

    def get_bool(self, field: str) -> bool:
        """Return *field* as a boolean, accepting ``"true"``/``"false"``."""
        value = self._require(field)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise TriggerEventFieldError(field, f"not a boolean: {value!r}")

    # ── Convenience properties ──────────────────────────────────────

    @property
    def feed_id(self) -> str:
        return self.get_str("feed_id")

    @property
    def stream(self) -> str:
        return self.get_str("stream")

    @property
    def trigger_name(self) -> str:
        return self.get_str("trigger_name")
