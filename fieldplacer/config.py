"""Placement engine settings loaded from environment/.env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlacementSettings(BaseSettings):
    # Minimum on-screen field size, in device pixels
    min_field_width_px: float = Field(default=200.0, gt=0)
    min_field_height_px: float = Field(default=60.0, gt=0)

    # Default field size as a share of the page surface
    default_field_width_percent: float = Field(default=15.0, gt=0, le=100)
    default_field_height_percent: float = Field(default=5.0, gt=0, le=100)

    form_id_length: int = Field(default=12, ge=6)

    # Page layout
    page_gap_px: float = Field(default=16.0, ge=0)
    default_zoom: float = Field(default=1.25, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="FIELD_PLACER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> PlacementSettings:
    return PlacementSettings()
