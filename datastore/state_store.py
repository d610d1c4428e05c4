from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

from models.records import Reading


class StateStore:
    """Holds the latest ``Reading`` for one writer and any number of readers.

    Writers build a new frozen ``Reading`` under a lock and swap the reference;
    readers take the current reference without locking, so they never see a
    half-written value and never wait on each other.
    """

    def __init__(self, initial: Optional[Reading] = None) -> None:
        self._current = initial or Reading()
        self._write_lock = Lock()

    def update(self, reading: Reading) -> Reading:
        """Store ``reading``; an error reading keeps the last good CPU value."""
        with self._write_lock:
            if reading.error is not None:
                reading = replace(
                    self._current,
                    error=reading.error,
                    captured_at=reading.captured_at,
                )
            self._current = reading
            return reading

    def record_cpu(self, cpu_percent: float, captured_at: Optional[datetime] = None) -> Reading:
        return self.update(
            Reading(
                cpu_percent=cpu_percent,
                captured_at=captured_at or datetime.now(timezone.utc),
            )
        )

    def record_error(self, message: str, captured_at: Optional[datetime] = None) -> Reading:
        return self.update(
            Reading(
                cpu_percent=self._current.cpu_percent,
                captured_at=captured_at or datetime.now(timezone.utc),
                error=message,
            )
        )

    def snapshot(self) -> Reading:
        return self._current
