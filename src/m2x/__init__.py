"""Python client for the M2X IoT data-platform API."""

__version__ = "0.1.0"

from m2x.api.client import M2XClient  # noqa: E402
from m2x.errors import M2XError  # noqa: E402
from m2x.events import TriggerEvent, TriggerEventFieldError  # noqa: E402

__all__ = ["M2XClient", "M2XError", "TriggerEvent", "TriggerEventFieldError", "__version__"]
