"""Tests for Settings loading, environment overrides, and persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from Tradle.config import Settings, load_settings, save_settings


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for field_name in Settings.model_fields:
        monkeypatch.delenv(f"TRADLE_{field_name.upper()}", raising=False)


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nope.json")
        assert settings == Settings()
        assert settings.price_source == "yfinance"
        assert settings.max_total_attempts == 50
        assert settings.bot_count == 100

    def test_file_values(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"price_source": "tiingo", "ranges_per_stock": 3}))
        settings = load_settings(path)
        assert settings.price_source == "tiingo"
        assert settings.ranges_per_stock == 3
        assert settings.max_stock_attempts == 10

    @pytest.mark.parametrize("content", ["{not json", '{"max_total_attempts": 0}'])
    def test_bad_file_falls_back(
        self, tmp_path: Path, content: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "settings.json"
        path.write_text(content)
        with caplog.at_level("WARNING", logger="Tradle.config"):
            settings = load_settings(path)
        assert settings == Settings()
        assert "using defaults" in caplog.text

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"bot_count": 20, "db_path": "a.db"}))
        monkeypatch.setenv("TRADLE_BOT_COUNT", "7")
        monkeypatch.setenv("TRADLE_TIINGO_TOKEN", "tok")

        settings = load_settings(path)

        assert settings.bot_count == 7
        assert settings.tiingo_token == "tok"
        assert settings.db_path == "a.db"

    def test_invalid_env_override_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TRADLE_PRICE_SOURCE", "bloomberg")
        with pytest.raises(ValidationError):
            load_settings(tmp_path / "nope.json")


class TestSaveSettings:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "settings.json"
        original = Settings(price_source="tiingo", min_request_interval_seconds=0.5)
        save_settings(original, path)
        assert path.exists()
        assert load_settings(path) == original

    def test_settings_are_frozen(self) -> None:
        with pytest.raises(ValidationError):
            Settings().bot_count = 3  # type: ignore[misc]
