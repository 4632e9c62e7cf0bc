# src/stayscore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/stayscore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `STAYSCORE_LOG_LEVEL`, `STAYSCORE_STORE_DIR`)
- an external YAML file via `STAYSCORE_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
- Every model default mirrors `defaults.yaml`, so `Settings()` is usable on its own (tests, embedding).
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from stayscore.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `stayscore.config`."""
    text = resources.files("stayscore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "StayScore"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/properties.json"


class QualitySettings(BaseModel):
    weights: dict[Literal["rating", "price", "demand", "availability"], float] = Field(
        default_factory=lambda: {
            "rating": 0.35,
            "price": 0.25,
            "demand": 0.25,
            "availability": 0.15,
        }
    )
    rating_scale: float = Field(5.0, gt=0)
    neutral_price_score: float = Field(0.5, ge=0, le=1)
    # Currency-agnostic; tune per deployment.
    default_reference_price: float = Field(50_000, gt=0)
    default_max_views: float = Field(1000, gt=0)
    default_max_bookings_count: float = Field(50, gt=0)
    availability_scores: dict[str, float] = Field(
        default_factory=lambda: {"available": 1.0, "maintenance": 0.5, "booked": 0.0}
    )
    unknown_availability_score: float = Field(0.5, ge=0, le=1)


class RecommendationPoints(BaseModel):
    city_match: int = 42
    query_match: int = 24
    favorite: int = 16
    high_demand: int = 10
    best_value: int = 8


class CueBand(BaseModel):
    min_percent: int = Field(..., ge=0, le=100)
    label: str
    tone: str = ""


class RecommendationSettings(BaseModel):
    points: RecommendationPoints = Field(default_factory=RecommendationPoints)
    high_demand_views_threshold: int = Field(50, ge=0)
    jitter_modulus: int = Field(97, gt=0)
    jitter_range: int = Field(7, gt=0)
    match_floor: int = Field(55, ge=0, le=100)
    match_ceiling: int = Field(96, ge=0, le=100)
    default_limit: int = Field(6, ge=1)
    # Ordered high to low; the last band is the catch-all.
    cue_bands: list[CueBand] = Field(
        default_factory=lambda: [
            CueBand(min_percent=85, label="High Confidence", tone="from-blue-600 to-purple-600"),
            CueBand(min_percent=72, label="Smart Match", tone="from-indigo-600 to-blue-600"),
            CueBand(min_percent=0, label="Trending Prediction", tone="from-purple-600 to-indigo-600"),
        ]
    )


class SearchIntentSettings(BaseModel):
    key: str = "lastSearch"
    backend: Literal["memory", "file"] = "file"
    store_dir: str = ".cache/stayscore/kv"


class ListingSettings(BaseModel):
    default_page_size: int = Field(9, ge=1)
    best_value_price_ratio: float = Field(0.8, gt=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    quality: QualitySettings = Field(default_factory=QualitySettings)
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)
    search_intent: SearchIntentSettings = Field(default_factory=SearchIntentSettings)
    listing: ListingSettings = Field(default_factory=ListingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small; scoring weights are only tunable via YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("STAYSCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    store_dir = os.getenv("STAYSCORE_STORE_DIR")
    if store_dir:
        data.setdefault("search_intent", {})["store_dir"] = store_dir

    backend = os.getenv("STAYSCORE_STORE_BACKEND")
    if backend:
        data.setdefault("search_intent", {})["backend"] = backend.strip().lower()

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("STAYSCORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
