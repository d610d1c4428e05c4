from __future__ import annotations

import threading

from display.events import EventDispatcher, MenuEvent


def test_dispatch_runs_handler() -> None:
    calls: list[str] = []
    dispatcher = EventDispatcher(
        handlers={MenuEvent.configure: lambda: calls.append("configure")},
        stop_event=threading.Event(),
    )

    dispatcher.dispatch(MenuEvent.configure)

    assert calls == ["configure"]
    assert not dispatcher.stop_event.is_set()


def test_handler_failure_does_not_stop_dispatcher() -> None:
    def broken() -> None:
        raise RuntimeError("editor missing")

    dispatcher = EventDispatcher(
        handlers={MenuEvent.configure: broken},
        stop_event=threading.Event(),
    )

    dispatcher.dispatch(MenuEvent.configure)

    assert not dispatcher.stop_event.is_set()


def test_quit_event_stops_thread() -> None:
    calls: list[str] = []
    stop = threading.Event()
    dispatcher = EventDispatcher(
        handlers={
            MenuEvent.show_menu: lambda: calls.append("menu"),
            MenuEvent.quit: lambda: calls.append("quit"),
        },
        stop_event=stop,
    )

    thread = dispatcher.start()
    dispatcher.post(MenuEvent.show_menu)
    dispatcher.post(MenuEvent.quit)
    thread.join(timeout=5)

    assert not thread.is_alive()
    assert stop.is_set()
    assert calls == ["menu", "quit"]
