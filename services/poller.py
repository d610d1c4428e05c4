"""Background polling of kernel_task CPU usage."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from datastore.state_store import StateStore
from display.menu import StatusMenu
from models.records import Reading
from models.thermal import ThermalState, ThresholdSet
from services.classifier import classify
from services.notifier import Notifier
from services.sampler import SampleError

logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.5
DEFAULT_INTERVAL = 5.0


class Sampler(Protocol):
    def sample(self) -> float: ...


def clamp_interval(interval: float) -> float:
    return max(MIN_INTERVAL, interval)


def compute_sleep(interval: float, sampling_duration: float, floor: float = MIN_INTERVAL) -> float:
    """Sleep that keeps a whole cycle close to ``interval`` despite sampling time."""
    return max(floor, interval - sampling_duration)


@dataclass(frozen=True)
class CycleResult:
    reading: Reading
    state: Optional[ThermalState]
    sampling_duration: float
    sleep_duration: float


class PollLoop:
    """Sample, classify, publish and notify on a fixed cadence until stopped."""

    def __init__(
        self,
        sampler: Sampler,
        store: StateStore,
        menu: StatusMenu,
        thresholds: ThresholdSet,
        interval: float = DEFAULT_INTERVAL,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sampler = sampler
        self.store = store
        self.menu = menu
        self.thresholds = thresholds
        self.interval = clamp_interval(interval)
        self.notifier = notifier
        self._clock = clock
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> CycleResult:
        started = self._clock()
        try:
            cpu_percent = self.sampler.sample()
        except SampleError as exc:
            sampling_duration = self._clock() - started
            reading = self.store.record_error(str(exc))
            logger.warning("Unable to sample kernel_task", extra={"reason": exc})
            self.menu.show_error(reading.error or str(exc))
            return self._finish(reading, None, sampling_duration)

        sampling_duration = self._clock() - started
        self.store.record_cpu(cpu_percent)
        reading = self.store.snapshot()
        state = classify(reading.cpu_percent, self.thresholds)
        logger.debug(
            "kernel_task sampled",
            extra={
                "cpu_percent": f"{reading.cpu_percent:.1f}",
                "state": state.value,
                "sample_ms": int(sampling_duration * 1000),
            },
        )
        self.menu.show_reading(reading.cpu_percent, state)
        if self.notifier is not None:
            self.notifier.notify(reading.cpu_percent, state)
        return self._finish(reading, state, sampling_duration)

    def _finish(
        self, reading: Reading, state: Optional[ThermalState], sampling_duration: float
    ) -> CycleResult:
        return CycleResult(
            reading=reading,
            state=state,
            sampling_duration=sampling_duration,
            sleep_duration=compute_sleep(self.interval, sampling_duration),
        )

    def run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                result = self.run_once()
                sleep_for = result.sleep_duration
            except Exception:
                logger.exception("Poll cycle failed")
                sleep_for = self.interval
            logger.debug("Sleeping until next cycle", extra={"sleep_s": f"{sleep_for:.2f}"})
            stop_event.wait(sleep_for)

    def start(self, stop_event: threading.Event) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.run, args=(stop_event,), name="poll-loop", daemon=True
        )
        self._thread.start()
        return self._thread
