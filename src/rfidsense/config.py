from __future__ import annotations

"""Configuration utilities for rfidsense.

Settings are grouped into sections (channels, cleaning, captions, spectral,
export, viz) built from Pydantic models.  Instances can be populated from
environment variables (``RFIDSENSE_<SECTION>__<KEY>``) or from YAML/JSON files
with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

import yaml

from .types import FEATURE_FIELDS

DEFAULT_TIME_COLUMN = "time_s"
DEFAULT_CHANNELS: Tuple[str, ...] = (
    "tag1_residual_rad",
    "tag2_residual_rad",
    "tag1_detrend_rad",
    "tag2_detrend_rad",
)
DEFAULT_BANDS: Tuple[Tuple[float, float], ...] = ((0.0, 2.0), (2.0, 5.0), (5.0, 10.0), (10.0, 20.0))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_strings(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class ChannelSettings(SectionModel):
    """Names of the time column and the value channels of a recording."""

    time_column: str = DEFAULT_TIME_COLUMN
    names: List[str] = Field(default_factory=lambda: list(DEFAULT_CHANNELS))

    @field_validator("names", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_strings(value)
        return value

    @field_validator("names")
    @classmethod
    def _non_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one channel is required")
        if len(set(value)) != len(value):
            raise ValueError("channel names must be unique")
        return value

    @property
    def required(self) -> List[str]:
        """Every column an input file must provide."""

        return [self.time_column, *self.names]


class CleaningSettings(SectionModel):
    """Row filtering and timestamp repair."""

    min_rows: int = Field(default=8, ge=1)
    time_eps: float = Field(default=1e-6, gt=0)
    row_policy: Literal["all", "any"] = "all"


class CaptionSettings(SectionModel):
    """Sliding-window captioning parameters (seconds)."""

    window: float = Field(default=1.0, gt=0)
    hop: float = Field(default=0.5, gt=0)
    sharp_ratio: float = Field(default=1.5, gt=0)
    trend_ratio: float = Field(default=0.4, gt=0)

    @model_validator(mode="after")
    def _ordered_ratios(self) -> "CaptionSettings":
        if self.trend_ratio > self.sharp_ratio:
            raise ValueError("trend_ratio must not exceed sharp_ratio")
        return self


class SpectralSettings(SectionModel):
    """Spectral descriptor parameters."""

    min_samples: int = Field(default=8, ge=2)
    bands: List[Tuple[float, float]] = Field(default_factory=lambda: list(DEFAULT_BANDS))

    @field_validator("bands")
    @classmethod
    def _check_bands(cls, value: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        if len(value) != 4:
            raise ValueError("exactly four frequency bands are required")
        for lo, hi in value:
            if not 0 <= lo < hi:
                raise ValueError(f"invalid band [{lo}, {hi})")
        return value


class ExportSettings(SectionModel):
    """Options controlling table export."""

    feature_fields: List[str] = Field(default_factory=lambda: list(FEATURE_FIELDS))
    format: Literal["csv", "json"] = "csv"
    output_dir: str = "."

    @field_validator("feature_fields", mode="before")
    @classmethod
    def _coerce_fields(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_strings(value)
        return value

    @field_validator("feature_fields")
    @classmethod
    def _known_fields(cls, value: List[str]) -> List[str]:
        unknown = [name for name in value if name not in FEATURE_FIELDS]
        if unknown:
            raise ValueError(f"unknown feature fields: {', '.join(unknown)}")
        return value


class VizSettings(SectionModel):
    """Configuration for the caption plot."""

    title: str = "Structural captions"
    save: str | None = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    channels: ChannelSettings = Field(default_factory=ChannelSettings)
    cleaning: CleaningSettings = Field(default_factory=CleaningSettings)
    captions: CaptionSettings = Field(default_factory=CaptionSettings)
    spectral: SpectralSettings = Field(default_factory=SpectralSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    viz: VizSettings = Field(default_factory=VizSettings)

    model_config = SettingsConfigDict(
        env_prefix="RFIDSENSE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Comma separated lists in the environment are not JSON; let the
        # field validators split them instead of failing in the source.
        class LenientEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LenientEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)


__all__ = [
    "DEFAULT_TIME_COLUMN",
    "DEFAULT_CHANNELS",
    "DEFAULT_BANDS",
    "ChannelSettings",
    "CleaningSettings",
    "CaptionSettings",
    "SpectralSettings",
    "ExportSettings",
    "VizSettings",
    "Settings",
    "load_settings",
]
