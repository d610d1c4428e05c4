from __future__ import annotations

import threading
from typing import Iterator

import pytest

from datastore.state_store import StateStore
from display.menu import MenuView, StatusMenu
from models.thermal import EmojiSet, ThermalState, ThresholdSet
from services.poller import PollLoop, clamp_interval, compute_sleep
from services.sampler import SampleExecutionError, SampleParseError


class StubSampler:
    def __init__(self, *outcomes) -> None:
        self._outcomes: Iterator = iter(outcomes)

    def sample(self) -> float:
        outcome = next(self._outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSink:
    def __init__(self) -> None:
        self.views: list[MenuView] = []

    def publish(self, view: MenuView) -> None:
        self.views.append(view)


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[tuple[float, ThermalState]] = []

    def notify(self, cpu_percent: float, state: ThermalState) -> None:
        self.calls.append((cpu_percent, state))


def _stepping_clock(step: float):
    ticks = iter(range(1000))
    return lambda: next(ticks) * step


def _loop(sampler, notifier=None, interval: float = 5.0, step: float = 1.0):
    store = StateStore()
    sink = RecordingSink()
    menu = StatusMenu(
        sink=sink, emojis=EmojiSet(), thresholds=ThresholdSet(), interval=interval
    )
    loop = PollLoop(
        sampler=sampler,
        store=store,
        menu=menu,
        thresholds=ThresholdSet(),
        interval=interval,
        notifier=notifier,
        clock=_stepping_clock(step),
    )
    return loop, store, sink


@pytest.mark.parametrize(
    ("interval", "sampling", "expected"),
    [(5.0, 1.0, 4.0), (1.0, 1.0, 0.5), (0.5, 0.0, 0.5), (10.0, 1.25, 8.75)],
)
def test_compute_sleep(interval: float, sampling: float, expected: float) -> None:
    assert compute_sleep(interval, sampling) == pytest.approx(expected)


def test_interval_is_clamped() -> None:
    assert clamp_interval(0.1) == 0.5
    assert clamp_interval(2.0) == 2.0


def test_successful_cycle_publishes_and_notifies() -> None:
    notifier = RecordingNotifier()
    loop, store, sink = _loop(StubSampler(45.0), notifier=notifier)

    result = loop.run_once()

    assert result.state is ThermalState.heavy_load
    assert result.sampling_duration == 1.0
    assert result.sleep_duration == 4.0
    assert store.snapshot().cpu_percent == 45.0
    assert notifier.calls == [(45.0, ThermalState.heavy_load)]
    view = sink.views[-1]
    assert view.title == "\U0001F605 45%"
    assert view.item("state").title == "State: Heavy Load (CPU: 45%)"


def test_failed_cycle_shows_error_and_skips_notifier() -> None:
    notifier = RecordingNotifier()
    loop, store, sink = _loop(
        StubSampler(12.0, SampleExecutionError("top requires privileged access")),
        notifier=notifier,
    )

    loop.run_once()
    result = loop.run_once()

    assert result.state is None
    assert store.snapshot().cpu_percent == 12.0
    assert store.snapshot().error == "top requires privileged access"
    assert notifier.calls == [(12.0, ThermalState.light_load)]
    view = sink.views[-1]
    assert view.title == EmojiSet().error
    assert view.item("error").visible
    assert view.item("help1").title == "To fix: Run with sudo"


def test_recovery_hides_error_entries() -> None:
    loop, store, sink = _loop(StubSampler(SampleParseError("bad output"), 2.0))

    loop.run_once()
    assert sink.views[-1].item("help2").title.startswith("This should not happen")

    loop.run_once()

    view = sink.views[-1]
    assert store.snapshot().error is None
    assert not view.item("error").visible
    assert not view.item("help1").visible
    assert view.title == EmojiSet().idle


def test_run_stops_when_event_set() -> None:
    stop = threading.Event()
    calls: list[float] = []

    class StoppingSampler:
        def sample(self) -> float:
            calls.append(1.0)
            stop.set()
            return 1.0

    loop, _, _ = _loop(StoppingSampler(), step=0.0)

    loop.run(stop)

    assert calls == [1.0]
