from __future__ import annotations

from m2x.config import DEFAULT_API_BASE, Settings


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("M2X_API_KEY", "env-key")
    monkeypatch.setenv("TRIGGER_PORT", "4000")
    settings = Settings(_env_file=None)
    assert settings.m2x_api_key == "env-key"
    assert settings.trigger_port == 4000


def test_settings_defaults(monkeypatch) -> None:
    for name in ("M2X_API_KEY", "M2X_API_BASE", "TRIGGER_STREAM_UNIT_LABEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.m2x_api_base == DEFAULT_API_BASE
    assert settings.trigger_path == "/streamEvent"
    assert settings.trigger_stream_unit is None


def test_trigger_stream_unit() -> None:
    settings = Settings(
        _env_file=None,
        trigger_stream_unit_label="celsius",
        trigger_stream_unit_symbol="C",
    )
    assert settings.trigger_stream_unit == {"label": "celsius", "symbol": "C"}
