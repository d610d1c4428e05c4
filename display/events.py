from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class MenuEvent(str, Enum):
    """Clicks the status item can emit."""

    configure = "configure"
    show_menu = "menu"
    quit = "quit"


Handler = Callable[[], None]


class EventDispatcher:
    """Drains menu clicks on its own thread and runs the matching handler.

    ``quit`` always sets ``stop_event`` after its handler, which ends the
    dispatcher and signals the rest of the process to shut down.
    """

    def __init__(
        self,
        handlers: Dict[MenuEvent, Handler],
        stop_event: threading.Event,
        events: Optional["queue.Queue[MenuEvent]"] = None,
    ) -> None:
        self.handlers = dict(handlers)
        self.stop_event = stop_event
        self.events: "queue.Queue[MenuEvent]" = events or queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def post(self, event: MenuEvent) -> None:
        self.events.put(event)

    def dispatch(self, event: MenuEvent) -> None:
        handler = self.handlers.get(event)
        if handler is not None:
            try:
                handler()
            except Exception:
                logger.exception("Menu handler failed", extra={"reason": event.value})
        if event is MenuEvent.quit:
            self.stop_event.set()

    def run(self) -> None:
        while not self.stop_event.is_set():
            try:
                event = self.events.get(timeout=0.2)
            except queue.Empty:
                continue
            self.dispatch(event)

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="menu-events", daemon=True)
        self._thread.start()
        return self._thread
