from __future__ import annotations

from datetime import datetime, timezone

from datastore.state_store import StateStore
from models.records import UNAVAILABLE_CPU, Reading


def test_initial_snapshot_is_empty() -> None:
    reading = StateStore().snapshot()

    assert reading.cpu_percent == 0.0
    assert reading.captured_at is None
    assert reading.ok


def test_error_keeps_last_good_cpu() -> None:
    store = StateStore()
    store.record_cpu(42.5)

    store.record_error("top: permission denied")

    reading = store.snapshot()
    assert reading.cpu_percent == 42.5
    assert reading.error == "top: permission denied"
    assert reading.effective_cpu == UNAVAILABLE_CPU


def test_update_with_error_reading_ignores_its_cpu() -> None:
    store = StateStore()
    store.record_cpu(10.0)
    captured = datetime(2024, 1, 1, tzinfo=timezone.utc)

    store.update(Reading(cpu_percent=-1.0, captured_at=captured, error="boom"))

    reading = store.snapshot()
    assert reading.cpu_percent == 10.0
    assert reading.captured_at == captured


def test_success_clears_error() -> None:
    store = StateStore()
    store.record_error("boom")

    store.record_cpu(3.0)

    reading = store.snapshot()
    assert reading.error is None
    assert reading.cpu_percent == 3.0
