"""Centralised settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_API_BASE = "http://api-m2x.att.com/v1"


class Settings(BaseSettings):
    """Settings populated from environment / .env file."""

    # M2X API connection
    m2x_api_key: str = ""
    m2x_api_base: str = DEFAULT_API_BASE

    # Trigger callback receiver
    trigger_host: str = "0.0.0.0"
    trigger_port: int = 3000
    trigger_path: str = "/streamEvent"
    trigger_callback_url: str = "http://localhost:3000/streamEvent"

    # Trigger to register on startup (skipped when trigger_feed is empty)
    trigger_feed: str = ""
    trigger_stream: str = "temperature"
    trigger_stream_unit_label: str = ""
    trigger_stream_unit_symbol: str = ""
    trigger_name: str = "m2x-trigger-server"
    trigger_condition: str = ">"
    trigger_value: str = "30"

    # Startup behaviour
    max_retries: int = 30
    retry_interval: int = 2

    # Logging
    log_level: str = "INFO"

    @property
    def trigger_stream_unit(self) -> dict[str, str] | None:
        """Return the stream unit payload, or ``None`` when no label is set."""
        if not self.trigger_stream_unit_label:
            return None
        return {
            "label": self.trigger_stream_unit_label,
            "symbol": self.trigger_stream_unit_symbol,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Return a cached *Settings* instance."""
    return Settings()
