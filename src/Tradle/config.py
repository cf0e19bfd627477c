"""Runtime settings with JSON file persistence and environment overrides.

Resolution order for each field: ``TRADLE_<FIELD>`` environment variable >
JSON settings file > built-in default.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH: Final[Path] = Path("data/tradle_settings.json")
ENV_PREFIX: Final[str] = "TRADLE_"


class Settings(BaseModel):
    """Tunables for challenge generation and the CLI."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/tradle.db"
    price_source: Literal["yfinance", "tiingo"] = "yfinance"
    tiingo_token: str | None = None
    min_request_interval_seconds: float = Field(default=1.0, ge=0)
    max_stock_attempts: int = Field(default=10, ge=1)
    ranges_per_stock: int = Field(default=5, ge=1)
    max_total_attempts: int = Field(default=50, ge=1)
    generation_timeout_seconds: float = Field(default=300.0, gt=0)
    catalog_path: str | None = None
    bot_count: int = Field(default=100, ge=0)


def _env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for field_name in Settings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            overrides[field_name] = value
    return overrides


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Load settings from *path*, then apply ``TRADLE_*`` environment overrides.

    A missing file silently yields defaults; an unreadable or invalid file
    is logged and ignored.

    Raises:
        ValidationError: If an environment override has an invalid value.
    """
    data: dict[str, object] = {}
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
            data = Settings.model_validate(loaded).model_dump(exclude_unset=True)
        except (json.JSONDecodeError, OSError, ValidationError):
            logger.warning("Failed to read settings file %s, using defaults", path)
            data = {}

    data.update(_env_overrides())
    return Settings.model_validate(data)


def save_settings(settings: Settings, path: Path = DEFAULT_SETTINGS_PATH) -> None:
    """Persist settings to JSON, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Settings saved to %s", path)
