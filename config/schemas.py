"""Pydantic schemas for the user configuration file."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.thermal import EmojiSet, ThresholdSet


class ThresholdOverrides(BaseModel):
    """Optional CPU percent boundaries; absent or non-positive means default."""

    model_config = ConfigDict(extra="ignore")

    idle: Optional[float] = None
    light: Optional[float] = None
    heavy: Optional[float] = None
    throttle: Optional[float] = None


class EmojiOverrides(BaseModel):
    """Optional title glyphs; absent or empty means the built-in glyph."""

    model_config = ConfigDict(extra="ignore")

    idle: Optional[str] = None
    light_load: Optional[str] = None
    heavy_load: Optional[str] = None
    throttling: Optional[str] = None
    heavy_throttling: Optional[str] = None
    error: Optional[str] = None


class MonitorConfig(BaseModel):
    """Contents of ``~/.kernel_task_monitor.json``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    esp_url: str = Field(default="", description="Base URL of the notifier endpoint.")
    thresholds: ThresholdOverrides = Field(default_factory=ThresholdOverrides)
    emojis: EmojiOverrides = Field(default_factory=EmojiOverrides)

    @property
    def endpoint(self) -> Optional[str]:
        candidate = self.esp_url.strip()
        return candidate or None

    def threshold_set(self) -> ThresholdSet:
        return ThresholdSet.from_overrides(**self.thresholds.model_dump())

    def emoji_set(self) -> EmojiSet:
        return EmojiSet.from_overrides(**self.emojis.model_dump())
