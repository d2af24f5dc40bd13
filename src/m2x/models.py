"""Records returned by the M2X API.

The models mirror the JSON documents of the remote service.  Fields the
API omits or sends as ``null`` fall back to empty values, and unknown
fields are ignored so that server-side additions do not break decoding.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Stream readings arrive as strings on some feeds and as numbers on others.
Reading = Union[str, int, float, None]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # The API sends ``null`` for unset strings and lists.
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                default = field.get_default(call_default_factory=True)
                if default is not None:
                    return default
        return value


class _Page(_Record):
    total: int = 0
    pages: int = 0
    limit: int = 0
    current_page: int = 0


# ── Blueprints & batches ─────────────────────────────────────────────────


class Datasources(_Record):
    total: int = 0
    registered: int = 0
    unregistered: int = 0


class Blueprint(_Record):
    """A device blueprint."""

    id: str = ""
    name: str = ""
    description: str = ""
    visibility: str = ""
    serial: str = ""
    status: str = ""
    feed: str = ""
    url: str = ""
    key: str = ""
    tags: list[str] = Field(default_factory=list)
    created: str = ""
    updated: str = ""
    datasources: Datasources = Field(default_factory=Datasources)


class Batch(Blueprint):
    """A batch of data sources sharing one configuration."""


class BlueprintList(_Page):
    blueprints: list[Blueprint] = Field(default_factory=list)


class BatchList(_Page):
    batches: list[Batch] = Field(default_factory=list)


# ── Feeds ────────────────────────────────────────────────────────────────


class Waypoint(_Record):
    timestamp: str = ""
    latitude: str = ""
    longitude: str = ""
    elevation: str = ""


class Location(_Record):
    name: str = ""
    latitude: str = ""
    longitude: str = ""
    elevation: str = ""
    waypoints: list[Waypoint] = Field(default_factory=list)


class Unit(_Record):
    label: str = ""
    symbol: str = ""


class Stream(_Record):
    """A named time-series channel of a feed."""

    name: str = ""
    value: Reading = None
    min: Reading = None
    max: Reading = None
    unit: Unit = Field(default_factory=Unit)
    url: str = ""
    created: str = ""
    updated: str = ""


class Value(_Record):
    at: str = ""
    value: Reading = None


class Values(_Record):
    start: str = ""
    end: str = ""
    limit: int = 0
    values: list[Value] = Field(default_factory=list)


class RequestLogEntry(_Record):
    at: str = ""
    status: int = 0
    method: str = ""
    path: str = ""


class RequestLog(_Record):
    requests: list[RequestLogEntry] = Field(default_factory=list)


class Trigger(_Record):
    """A server-side condition on a stream that calls back when met."""

    id: str = ""
    name: str = ""
    stream: str = ""
    condition: str = ""
    value: Union[str, int, float] = ""
    callback_url: str = ""
    url: str = ""
    status: str = ""
    created: str = ""
    updated: str = ""


class TriggerList(_Record):
    triggers: list[Trigger] = Field(default_factory=list)


class Feed(_Record):
    """A device's container of streams, location and triggers."""

    id: str = ""
    name: str = ""
    description: str = ""
    visibility: str = ""
    status: str = ""
    type: str = ""
    tags: list[str] = Field(default_factory=list)
    url: str = ""
    key: str = ""
    created: str = ""
    updated: str = ""
    location: Location = Field(default_factory=Location)
    streams: list[Stream] = Field(default_factory=list)
    triggers: list[Trigger] = Field(default_factory=list)


class FeedList(_Page):
    feeds: list[Feed] = Field(default_factory=list)


# ── Keys ─────────────────────────────────────────────────────────────────


class Key(_Record):
    """An access key scoped to the account, a feed or a stream."""

    id: str = ""
    name: str = ""
    key: str = ""
    master: bool = False
    feed: str = ""
    stream: str = ""
    expires_at: str = ""
    expired: bool | str = ""
    permissions: list[str] = Field(default_factory=list)


class KeyList(_Page):
    keys: list[Key] = Field(default_factory=list)


# ── Service ──────────────────────────────────────────────────────────────


class Status(_Record):
    """Health indicators returned by ``GET /status``."""

    api: str = ""
    triggers: str = ""
