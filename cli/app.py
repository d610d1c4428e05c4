from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

import typer

from cli.render import ConsoleDisplay, render_menu
from config.loader import load_config, open_config_file
from datastore.state_store import StateStore
from display.events import EventDispatcher, MenuEvent
from display.menu import StatusMenu
from logging_config import configure_logging
from services.notifier import Notifier
from services.poller import DEFAULT_INTERVAL, PollLoop, clamp_interval
from services.sampler import TopSampler
from settings import get_settings

logger = logging.getLogger(__name__)

_COMMANDS = {
    "c": MenuEvent.configure,
    "configure": MenuEvent.configure,
    "m": MenuEvent.show_menu,
    "menu": MenuEvent.show_menu,
    "q": MenuEvent.quit,
    "quit": MenuEvent.quit,
}

app = typer.Typer(
    help="Show kernel_task CPU usage as a thermal state indicator.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _read_commands(stream: TextIO, dispatcher: EventDispatcher) -> None:
    for line in stream:
        command = line.strip().lower()
        if not command:
            continue
        event = _COMMANDS.get(command)
        if event is None:
            typer.echo("Commands: c(onfigure), m(enu), q(uit)")
            continue
        dispatcher.post(event)
        if event is MenuEvent.quit:
            return


@app.command()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Always show the CPU percentage and enable diagnostic logging.",
    ),
    interval: float = typer.Option(
        DEFAULT_INTERVAL,
        "--interval",
        "-t",
        help="Update interval in seconds (min 0.5).",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Configuration file (defaults to KTM_CONFIG_PATH or ~/.kernel_task_monitor.json).",
    ),
) -> None:
    """Poll kernel_task and report its thermal state until quit."""
    configure_logging("DEBUG" if debug else None)
    settings = get_settings()
    path = config_path or settings.config_path
    interval = clamp_interval(interval)

    config = load_config(path)
    thresholds = config.threshold_set()
    endpoint = config.endpoint

    display = ConsoleDisplay()
    menu = StatusMenu(
        sink=display,
        emojis=config.emoji_set(),
        thresholds=thresholds,
        interval=interval,
        verbose=debug,
        endpoint=endpoint,
        program=sys.argv[0],
    )
    notifier = Notifier(endpoint, timeout=settings.notify_timeout) if endpoint else None
    poller = PollLoop(
        sampler=TopSampler(),
        store=StateStore(),
        menu=menu,
        thresholds=thresholds,
        interval=interval,
        notifier=notifier,
    )

    stop_event = threading.Event()
    dispatcher = EventDispatcher(
        handlers={
            MenuEvent.configure: lambda: open_config_file(path, settings.open_command),
            MenuEvent.show_menu: lambda: render_menu(menu.view),
        },
        stop_event=stop_event,
    )

    typer.echo(menu.view.tooltip)
    poll_thread = poller.start(stop_event)
    dispatcher.start()
    reader = threading.Thread(
        target=_read_commands,
        args=(sys.stdin, dispatcher),
        name="stdin-commands",
        daemon=True,
    )
    reader.start()

    try:
        while not stop_event.wait(0.5):
            pass
    except KeyboardInterrupt:
        stop_event.set()
    finally:
        poll_thread.join(timeout=poller.interval + 2.0)
        if notifier is not None:
            notifier.close()
    logger.debug("Monitor stopped")


def run() -> None:
    app()
