from __future__ import annotations

from threading import Lock
from typing import Optional

import typer

from display.menu import MenuView


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def render_menu(view: MenuView) -> None:
    echo_heading(f"{view.title}  ({view.tooltip})")
    for item in view.visible_items():
        marker = "*" if item.enabled else " "
        typer.echo(f" {marker} {item.title}")


class ConsoleDisplay:
    """Terminal stand-in for the menu bar: prints the title whenever it changes."""

    def __init__(self, show_menu_on_error: bool = True) -> None:
        self.show_menu_on_error = show_menu_on_error
        self.last_view: Optional[MenuView] = None
        self._lock = Lock()

    def publish(self, view: MenuView) -> None:
        with self._lock:
            previous = self.last_view
            self.last_view = view
            if previous is not None and previous.title == view.title and previous.items == view.items:
                return
            error_item = view.item("error")
            if error_item.visible:
                typer.secho(view.title, fg=typer.colors.RED)
                was_visible = previous is not None and previous.item("error").visible
                if self.show_menu_on_error and not was_visible:
                    for key in ("error", "help1", "help2", "help3"):
                        typer.secho(f"   {view.item(key).title}", fg=typer.colors.RED)
                return
            if previous is None or previous.title != view.title:
                typer.echo(view.title)
