"""Display-facing model of the status item: title, tooltip and menu entries."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Protocol

from models.thermal import EmojiSet, ThermalState, ThresholdSet

PRIVILEGE_KEYWORDS = ("privileged", "sudo", "permission", "not permitted")

INITIAL_TITLE = "--%"


@dataclass(frozen=True)
class MenuItem:
    key: str
    title: str
    tooltip: str = ""
    enabled: bool = True
    visible: bool = True


@dataclass(frozen=True)
class MenuView:
    """Immutable snapshot handed to the display sink after every change."""

    title: str
    tooltip: str
    items: tuple[MenuItem, ...]

    def item(self, key: str) -> MenuItem:
        for item in self.items:
            if item.key == key:
                return item
        raise KeyError(key)

    def visible_items(self) -> list[MenuItem]:
        return [item for item in self.items if item.visible]


class DisplaySink(Protocol):
    def publish(self, view: MenuView) -> None: ...


def is_privilege_error(message: str) -> bool:
    lowered = message.lower()
    return any(keyword in lowered for keyword in PRIVILEGE_KEYWORDS)


def remediation_hints(message: str, program: str) -> tuple[str, str, str]:
    if is_privilege_error(message):
        return (
            "To fix: Run with sudo",
            f"Terminal: sudo {program}",
            "Or: Configure sudo NOPASSWD for top",
        )
    return (
        "Cannot read kernel_task CPU usage",
        "This should not happen - kernel_task always exists",
        "Try restarting the app",
    )


class StatusMenu:
    """Keeps the status item in sync with the latest reading.

    Only the poll loop calls ``show_reading``/``show_error``; readers on other
    threads use ``view``, which is always a complete frozen snapshot.
    """

    def __init__(
        self,
        sink: DisplaySink,
        emojis: EmojiSet,
        thresholds: ThresholdSet,
        interval: float,
        verbose: bool = False,
        endpoint: Optional[str] = None,
        program: str = "ktm",
    ) -> None:
        self._sink = sink
        self.emojis = emojis
        self.thresholds = thresholds
        self.verbose = verbose
        self.program = program
        self._view = self._initial_view(interval, endpoint)
        self._sink.publish(self._view)

    @property
    def view(self) -> MenuView:
        return self._view

    def _initial_view(self, interval: float, endpoint: Optional[str]) -> MenuView:
        tooltip = f"kernel_task CPU Monitor (update: {interval:.1f}s)"
        settings_line = f"Update: {interval:.1f}s"
        if self.verbose:
            tooltip += " [DEBUG]"
            settings_line += ", Debug ON"
        endpoint_line = f"ESP32 URL: {endpoint}" if endpoint else "ESP32: Disabled"

        items = (
            MenuItem("configure", "Configure...", "Open configuration file"),
            MenuItem("endpoint", endpoint_line, "Current ESP32 configuration", enabled=False),
            MenuItem("error", "", enabled=False, visible=False),
            MenuItem("help1", "", visible=False),
            MenuItem("help2", "", visible=False),
            MenuItem("help3", "", visible=False),
            MenuItem(
                "state",
                "State: Unknown",
                "Thermal state based on kernel_task",
                enabled=False,
            ),
            MenuItem("settings", settings_line, "Current settings", enabled=False),
            MenuItem(
                "note",
                "Changes require restart",
                "Configuration changes require restarting KTM",
                enabled=False,
            ),
            MenuItem("quit", "Quit", "Quit the app"),
        )
        return MenuView(title=INITIAL_TITLE, tooltip=tooltip, items=items)

    def title_for(self, cpu_percent: float, state: ThermalState) -> str:
        title = self.emojis.for_state(state)
        if self.verbose or cpu_percent > self.thresholds.light:
            title += f" {cpu_percent:.0f}%"
        return title

    def show_reading(self, cpu_percent: float, state: ThermalState) -> MenuView:
        updates = {
            "state": {"title": f"State: {state.value} (CPU: {cpu_percent:.0f}%)"},
            "error": {"visible": False},
            "help1": {"visible": False},
            "help2": {"visible": False},
            "help3": {"visible": False},
        }
        return self._publish(self.title_for(cpu_percent, state), updates)

    def show_error(self, message: str) -> MenuView:
        hints = remediation_hints(message, self.program)
        updates = {
            "error": {"title": f"⚠️ Error: {message}", "visible": True},
            "help1": {"title": hints[0], "visible": True},
            "help2": {"title": hints[1], "visible": True},
            "help3": {"title": hints[2], "visible": True},
        }
        return self._publish(self.emojis.error, updates)

    def _publish(self, title: str, updates: dict[str, dict]) -> MenuView:
        items = tuple(
            replace(item, **updates[item.key]) if item.key in updates else item
            for item in self._view.items
        )
        self._view = replace(self._view, title=title, items=items)
        self._sink.publish(self._view)
        return self._view
