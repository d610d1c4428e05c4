"""Thermal states and the per-state thresholds and glyphs that configure them."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional

DEFAULT_IDLE_THRESHOLD = 5.0
DEFAULT_LIGHT_THRESHOLD = 20.0
DEFAULT_HEAVY_THRESHOLD = 50.0
DEFAULT_THROTTLE_THRESHOLD = 100.0


class ThermalState(str, Enum):
    """Severity buckets ordered from coolest to hottest."""

    idle = "Idle"
    light_load = "Light Load"
    heavy_load = "Heavy Load"
    throttling = "Throttling"
    heavy_throttling = "Heavy Throttling"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def slug(self) -> str:
        """State name as sent over the wire, e.g. ``Heavy_Load``."""
        return self.value.replace(" ", "_")


_SEVERITY = {state: index for index, state in enumerate(ThermalState)}


@dataclass(frozen=True)
class ThresholdSet:
    """Inclusive upper bounds (CPU percent) for the four lower states."""

    idle: float = DEFAULT_IDLE_THRESHOLD
    light: float = DEFAULT_LIGHT_THRESHOLD
    heavy: float = DEFAULT_HEAVY_THRESHOLD
    throttle: float = DEFAULT_THROTTLE_THRESHOLD

    @classmethod
    def from_overrides(
        cls,
        idle: Optional[float] = None,
        light: Optional[float] = None,
        heavy: Optional[float] = None,
        throttle: Optional[float] = None,
    ) -> "ThresholdSet":
        """Apply overrides field by field; missing or non-positive values keep the default."""
        defaults = cls()
        overrides = {"idle": idle, "light": light, "heavy": heavy, "throttle": throttle}
        resolved = {
            name: value if value is not None and value > 0 else getattr(defaults, name)
            for name, value in overrides.items()
        }
        return cls(**resolved)

    def inversions(self) -> list[tuple[str, str]]:
        """Adjacent boundary pairs that are not strictly increasing."""
        names = [field.name for field in fields(self)]
        return [
            (lower, upper)
            for lower, upper in zip(names, names[1:])
            if getattr(self, lower) >= getattr(self, upper)
        ]


@dataclass(frozen=True)
class EmojiSet:
    """Title glyph per thermal state plus one for the error condition."""

    idle: str = "\U0001F634"
    light_load: str = "\U0001F60A"
    heavy_load: str = "\U0001F605"
    throttling: str = "\U0001F975"
    heavy_throttling: str = "\U0001F525"
    error: str = "❓"

    @classmethod
    def from_overrides(cls, **overrides: Optional[str]) -> "EmojiSet":
        defaults = cls()
        resolved = {}
        for field in fields(cls):
            value = overrides.get(field.name)
            resolved[field.name] = value if value else getattr(defaults, field.name)
        return cls(**resolved)

    def for_state(self, state: ThermalState) -> str:
        return getattr(self, state.name)
