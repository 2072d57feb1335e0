"""Bottom status line: lane, selection, mode info, hints and a transient message."""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from core import Task
from util.display import fit, truncate
from util.responsive import MINIMAL_STATUS_WIDTH

from .themes import paint, paint_over

MODES = ("normal", "filter", "search", "edit", "confirm", "help")

MESSAGE_TTL = {
    "success": 2.0,
    "error": 3.0,
    "warning": 2.5,
    "info": 2.0,
}
MESSAGE_ICONS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "ℹ",
}

NAVIGATION_HINTS = {
    "filter": "1-5: Set Filter | C: Clear | ESC: Exit",
    "search": "Type to search | Enter: Apply | ESC: Exit",
    "edit": "Type to edit | Enter: Save | ESC: Cancel",
    "confirm": "Y: Confirm | any other key: Cancel",
    "help": "↑↓/PgUp/PgDn: Scroll | C/ESC: Close",
    "normal": "←→: Columns | ↑↓: Tasks | 1-3: Move | H: Help | Q: Quit",
}


@dataclass
class StatusSnapshot:
    """What the status bar needs to know about the board for one redraw."""

    current_column: str = ""
    selected_task: Optional[Task] = None
    status_counts: Dict[str, int] = field(default_factory=dict)
    active_filters: int = 0
    search_query: str = ""
    input_buffer: str = ""
    prompt: str = ""
    folded: int = 0


class StatusBar:
    def __init__(self, clock: Callable[[], float] = time.time):
        self.mode = "normal"
        self.message = ""
        self.message_expires = 0.0
        self._clock = clock

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown status bar mode: {mode}")
        self.mode = mode

    def show_message(self, message: str, ttl: float = 3.0) -> None:
        self.message = message
        self.message_expires = self._clock() + ttl

    def notify(self, level: str, message: str) -> None:
        style = f"message.{level}"
        self.show_message(paint(style, f"{MESSAGE_ICONS.get(level, '')} {message}"), MESSAGE_TTL.get(level, 3.0))

    def show_success(self, message: str) -> None:
        self.notify("success", message)

    def show_error(self, message: str) -> None:
        self.notify("error", message)

    def show_warning(self, message: str) -> None:
        self.notify("warning", message)

    def show_info(self, message: str) -> None:
        self.notify("info", message)

    def clear_message(self) -> None:
        self.message = ""
        self.message_expires = 0.0

    def current_message(self) -> str:
        """Active message, dropping it once its TTL has passed."""
        if self.message and self._clock() >= self.message_expires:
            self.clear_message()
        return self.message

    def has_message(self) -> bool:
        return bool(self.current_message())

    def reset(self) -> None:
        self.mode = "normal"
        self.clear_message()

    def get_mode_info(self, snapshot: StatusSnapshot) -> str:
        if self.mode == "filter":
            if snapshot.active_filters:
                return paint("mode.filter", f"FILTER ({snapshot.active_filters} active)")
            return paint("mode.filter", "FILTER MODE")
        if self.mode == "search":
            return paint("mode.search", f'SEARCH: "{snapshot.input_buffer}_"')
        if self.mode == "edit":
            return paint("mode.edit", f"EDIT: {snapshot.input_buffer}_")
        if self.mode == "confirm":
            return paint("message.warning", snapshot.prompt or "Confirm?")
        if self.mode == "help":
            return paint("mode.help", "HELP MODE")
        counts = snapshot.status_counts
        text = f"P:{counts.get('pending', 0)} | I:{counts.get('in-progress', 0)} | D:{counts.get('done', 0)}"
        if snapshot.folded:
            text += f" (+{snapshot.folded} other)"
        if snapshot.active_filters:
            text += f" | {paint('mode.filter', f'{snapshot.active_filters} filter(s)')}"
        if snapshot.search_query:
            text += f" | {paint('mode.search', f'/{snapshot.search_query}')}"
        return text

    def build_content(self, snapshot: StatusSnapshot, width: int) -> str:
        parts = []
        if snapshot.current_column:
            parts.append(f"Column: {snapshot.current_column.upper()}")
        if snapshot.selected_task is not None:
            parts.append(truncate(f"Task: #{snapshot.selected_task.id} - {snapshot.selected_task.title}", 40))
        mode_info = self.get_mode_info(snapshot)
        if mode_info:
            parts.append(mode_info)
        parts.append(NAVIGATION_HINTS.get(self.mode, NAVIGATION_HINTS["normal"]))
        content = " | ".join(parts)
        message = self.current_message()
        if message:
            content = f"{message} | {content}"
        return truncate(content, width - 2)

    def render(self, snapshot: StatusSnapshot, width: int) -> str:
        if width < MINIMAL_STATUS_WIDTH:
            return self.render_minimal(snapshot, width)
        content = self.build_content(snapshot, width)
        return paint_over("statusbar", " " + fit(content, max(0, width - 2)) + " ")

    def render_minimal(self, snapshot: StatusSnapshot, width: int) -> str:
        parts = []
        if snapshot.current_column:
            parts.append(snapshot.current_column[0].upper())
        if snapshot.selected_task is not None:
            parts.append(f"#{snapshot.selected_task.id}")
        if self.mode != "normal":
            parts.append(self.mode[0].upper())
        parts.append("H:Help Q:Quit")
        content = "|".join(parts)
        message = self.current_message()
        if message:
            content = f"{message}|{content}"
        inner = max(0, width - 2)
        return paint_over("statusbar", " " + fit(truncate(content, inner), inner) + " ")


__all__ = ["MODES", "MESSAGE_TTL", "StatusBar", "StatusSnapshot"]
