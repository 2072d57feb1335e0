"""Kanban board controller and its prompt_toolkit application shell."""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.application.current import get_app_or_none
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from core.status import LANE_STATUSES
from infrastructure.task_store import TaskDocument, TaskStoreError, read_tasks

from .board_controls import FILTER_SLOTS, BoardControlsHandler
from .board_layout import BoardLayout
from .board_state import ActionResult, BoardState
from .modal_input import CONFIRM, EDIT, SEARCH, ModalInput
from .navigation import NavigationHandler
from .overlays import OverlayStack
from .popups import HelpPopup, StatisticsPopup
from .status_bar import StatusBar, StatusSnapshot
from .status_handler import StatusHandler
from .task_operations import TaskOperationsHandler
from .terminal import SHOW_CURSOR

logger = logging.getLogger("taskhero.board")

STATUS_KEYS = {str(i + 1): status for i, status in enumerate(LANE_STATUSES)}
MODAL_MODES = {SEARCH: "search", EDIT: "edit", CONFIRM: "confirm"}
DEFAULT_TTIMEOUTLEN = 0.05


class KanbanBoard:
    """Owns the board state and handlers; turns key names into actions."""

    def __init__(self, tasks_path: Optional[Path] = None, width: int = 80, height: int = 24, clock: Callable[[], float] = time.time):
        self.state = BoardState(layout=BoardLayout(width, height), tasks_path=Path(tasks_path) if tasks_path else None)
        self.overlays = OverlayStack()
        self.modal = ModalInput()
        self.status_bar = StatusBar(clock)
        self.navigation = NavigationHandler(self.state)
        self.status = StatusHandler(self.state)
        self.controls = BoardControlsHandler(self.state, self.overlays, self.modal)
        self.operations = TaskOperationsHandler(self.state, self.overlays, self.modal)
        self.should_exit = False

    @property
    def layout(self) -> BoardLayout:
        return self.state.layout

    def load(self) -> bool:
        """Initial read; a failure leaves an empty board and an error message."""
        if self.state.tasks_path is None:
            self.state.load_document(TaskDocument())
            self.status_bar.show_warning("No tasks file given")
            return False
        try:
            document = read_tasks(self.state.tasks_path)
        except TaskStoreError as exc:
            logger.warning("could not load tasks: %s", exc)
            self.state.load_document(TaskDocument())
            self.status_bar.show_error(str(exc))
            return False
        self.state.load_document(document)
        logger.info("loaded %d tasks from %s", len(document.tasks), self.state.tasks_path)
        return True

    def resize(self, width: int, height: int) -> bool:
        return self.layout.resize(width, height)

    # ------------------------------------------------------------------ feedback

    def report(self, result: Optional[ActionResult], quiet_success: bool = False) -> None:
        if result is None:
            return
        if result.requires_confirmation or result.requires_input:
            return
        if result.success:
            if result.message and not quiet_success:
                self.status_bar.show_success(result.message)
            return
        reason = result.reason or "Action failed"
        if result.incomplete_dependencies:
            reason += ": " + ", ".join(f"#{dep}" for dep in result.incomplete_dependencies)
        self.status_bar.show_error(reason)

    def sync_mode(self) -> None:
        if self.modal.active:
            self.status_bar.set_mode(MODAL_MODES[self.modal.kind])
        elif self.overlays.is_open("help"):
            self.status_bar.set_mode("help")
        elif self.state.is_filter_mode:
            self.status_bar.set_mode("filter")
        else:
            self.status_bar.set_mode("normal")

    # ------------------------------------------------------------------ keys

    def dispatch_key(self, key: str) -> None:
        try:
            self._dispatch(key)
        except Exception as exc:  # pragma: no cover
            logger.exception("key %r failed", key)
            self.status_bar.show_error(f"Unexpected error: {exc}")
        self.sync_mode()

    def _dispatch(self, key: str) -> None:
        if self.modal.active:
            outcome = self.modal.feed(key)
            if outcome is not None:
                self.report(self.modal.last_result)
            return
        if self.overlays and self._popup_key(key):
            return
        if self.state.is_filter_mode and self._filter_key(key):
            return
        self._board_key(key)

    def _close_top_overlay(self) -> None:
        self.overlays.pop()
        top = self.overlays.top
        self.state.focus_mode = top.kind if top is not None and top.kind in ("details", "help") else "board"

    def _popup_key(self, key: str) -> bool:
        popup = self.overlays.top
        page = popup.content_rows(self.layout.terminal_width, self.layout.terminal_height)
        lowered = key.lower() if len(key) == 1 else key
        if lowered in ("c", "escape"):
            self._close_top_overlay()
        elif key == "up":
            popup.scroll_up()
        elif key == "down":
            popup.scroll_down()
        elif key == "pageup":
            popup.scroll_up(page)
        elif key == "pagedown":
            popup.scroll_down(page)
        elif lowered in ("h", "?") and not self.overlays.is_open("help"):
            self.open_help()
        elif key == "tab":
            self.report(self.controls.cycle_focus(), quiet_success=True)
        elif lowered == "q":
            self.should_exit = True
        # Anything else is swallowed while a popup is open.
        return True

    def _filter_key(self, key: str) -> bool:
        if key in FILTER_SLOTS or key in ("c", "C", "escape"):
            self.report(self.controls.handle_filter_key(key))
            return True
        return False

    def _board_key(self, key: str) -> None:
        lowered = key.lower() if len(key) == 1 else key
        column = self.layout.get_current_column()
        selected = self.layout.get_selected_task()
        if key == "left":
            self.navigation.move_to_previous_column()
        elif key == "right":
            self.navigation.move_to_next_column()
        elif key == "up":
            self.navigation.move_selection_up()
        elif key == "down":
            self.navigation.move_selection_down()
        elif key in ("pageup", "c-up"):
            column.scroll_up()
        elif key in ("pagedown", "c-down"):
            column.scroll_down()
        elif key in STATUS_KEYS:
            self.report(self.status.move_selected_task_to_status(STATUS_KEYS[key]))
        elif lowered == "u":
            self.report(self.status.undo_last_change())
        elif lowered == "b":
            self.report(self.navigation.go_back(), quiet_success=True)
        elif lowered == "v":
            self.report(self.operations.view_task_details(selected), quiet_success=True)
        elif lowered == "d":
            self.report(self.operations.delete_task(selected))
        elif lowered == "e":
            self.report(self.operations.edit_task_title(selected))
        elif lowered == "i":
            result = self.operations.show_task_info(selected)
            if result.success:
                self.status_bar.show_info(result.data["info"])
            else:
                self.report(result)
        elif lowered == "r":
            self.report(self.operations.refresh_board())
        elif lowered == "s":
            self.overlays.push(StatisticsPopup(self.layout.get_statistics()))
        elif lowered == "f":
            result = self.controls.toggle_filter()
            self.status_bar.show_info(result.message)
        elif key == "/":
            self.controls.open_search()
        elif lowered in ("h", "?"):
            self.open_help()
        elif key == "tab":
            self.report(self.controls.cycle_focus(), quiet_success=True)
        elif lowered == "q":
            self.should_exit = True

    def open_help(self) -> None:
        self.overlays.push(HelpPopup())
        self.state.focus_mode = "help"

    # ------------------------------------------------------------------ rendering

    def snapshot(self) -> StatusSnapshot:
        stats = self.layout.get_statistics()
        return StatusSnapshot(
            current_column=self.layout.get_current_status(),
            selected_task=self.layout.get_selected_task(),
            status_counts=stats.status_counts,
            active_filters=self.state.filters.active_count(),
            search_query=self.state.search_query,
            input_buffer=self.modal.buffer,
            prompt=self.modal.prompt,
            folded=stats.folded_tasks,
        )

    def render_lines(self) -> List[str]:
        status_line = self.status_bar.render(self.snapshot(), self.layout.terminal_width)
        return self.layout.render(status_line, list(self.overlays))

    def render_text(self) -> str:
        return "\n".join(self.render_lines())


def build_application(board: KanbanBoard, ttimeoutlen: float = DEFAULT_TTIMEOUTLEN) -> Application:
    kb = KeyBindings()
    modal_active = Condition(lambda: board.modal.active)
    not_modal = ~modal_active

    def _after(event) -> None:
        if board.should_exit:
            event.app.exit(result=0)

    def _named(name: str):
        def handler(event) -> None:
            board.dispatch_key(name)
            _after(event)

        return handler

    for key, name in (
        ("left", "left"),
        ("right", "right"),
        ("up", "up"),
        ("down", "down"),
        ("pageup", "pageup"),
        ("pagedown", "pagedown"),
        ("c-up", "c-up"),
        ("c-down", "c-down"),
        ("tab", "tab"),
        ("escape", "escape"),
        ("enter", "enter"),
        ("backspace", "backspace"),
    ):
        kb.add(key, eager=True)(_named(name))

    @kb.add("c-c", filter=modal_active, eager=True)
    def _(event):
        """Ctrl+C - cancel the open input."""
        board.dispatch_key("c-c")

    @kb.add("c-c", filter=not_modal)
    @kb.add("c-q", filter=not_modal)
    def _(event):
        event.app.exit(result=0)

    @kb.add(Keys.Any)
    def _(event):
        if event.data:
            board.dispatch_key(event.data)
            _after(event)

    def get_frame():
        app = get_app_or_none()
        if app is not None:
            size = app.output.get_size()
            board.resize(size.columns, size.rows)
        return ANSI(board.render_text())

    body = Window(content=FormattedTextControl(get_frame), always_hide_cursor=True, wrap_lines=False)
    app = Application(
        layout=Layout(HSplit([body])),
        key_bindings=kb,
        full_screen=True,
        mouse_support=False,
        # Redraw every second so expired status messages disappear.
        refresh_interval=1.0,
    )
    # Esc closes popups immediately instead of waiting for an escape sequence.
    app.ttimeoutlen = ttimeoutlen
    return app


def run_board(tasks_path: Path, ttimeoutlen: float = DEFAULT_TTIMEOUTLEN) -> int:
    board = KanbanBoard(tasks_path)
    board.load()
    app = build_application(board, ttimeoutlen=ttimeoutlen)
    try:
        return app.run() or 0
    finally:
        # prompt_toolkit restores the terminal; make sure the cursor is back too.
        app.output.write_raw(SHOW_CURSOR)
        app.output.flush()


__all__ = ["KanbanBoard", "build_application", "run_board"]
