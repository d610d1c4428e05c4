"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# Reported in place of a CPU value when a sample could not be obtained.
UNAVAILABLE_CPU = -1.0


@dataclass(frozen=True, slots=True)
class Reading:
    """The most recent kernel_task sample, or the error that replaced it."""

    cpu_percent: float = 0.0
    captured_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def effective_cpu(self) -> float:
        return self.cpu_percent if self.error is None else UNAVAILABLE_CPU
