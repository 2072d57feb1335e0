"""Filter mode, search capture and focus cycling."""

from typing import Any, Dict, Optional

from core import build_status_index

from .board_state import FOCUS_MODES, ActionResult, BoardState
from .filters import FILTER_LABELS, FLAG_CYCLE, PRIORITY_CYCLE, STATUS_CYCLE, next_in_cycle, validate_filter
from .modal_input import SEARCH, ModalInput, ModalOutcome
from .overlays import OverlayStack
from .popups import HelpPopup, TaskDetailsPopup

# Filter-mode number keys, in order.
FILTER_SLOTS = {
    "1": ("status", STATUS_CYCLE),
    "2": ("priority", PRIORITY_CYCLE),
    "3": ("prd_source", FLAG_CYCLE),
    "4": ("has_subtasks", FLAG_CYCLE),
    "5": ("has_dependencies", FLAG_CYCLE),
}


def _describe(value) -> str:
    if value is None:
        return "off"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


class BoardControlsHandler:
    def __init__(self, state: BoardState, overlays: Optional[OverlayStack] = None, modal: Optional[ModalInput] = None):
        self.state = state
        self.overlays = overlays if overlays is not None else OverlayStack()
        self.modal = modal if modal is not None else ModalInput()

    # ------------------------------------------------------------------ filters

    def toggle_filter(self) -> ActionResult:
        self.state.is_filter_mode = not self.state.is_filter_mode
        if not self.state.is_filter_mode:
            self.clear_all_filters()
            return ActionResult(True, message="Filter mode disabled", data={"filter_mode": False})
        return ActionResult(True, message="Filter mode enabled", data={"filter_mode": True})

    def exit_filter_mode(self) -> ActionResult:
        self.state.is_filter_mode = False
        return ActionResult(True, message="Filter mode closed", data={"filter_mode": False})

    def set_filter(self, key: str, value) -> ActionResult:
        error = validate_filter(key, value)
        if error:
            return ActionResult.fail(error)
        setattr(self.state.filters, key, value)
        self.apply_filters()
        label = FILTER_LABELS[key]
        if value is None:
            message = f"{label} filter cleared"
        else:
            message = f"Filtered by {label.lower()}: {_describe(value)}"
        return ActionResult(True, message=message, data={"filter": key, "value": value})

    def apply_status_filter(self, status: Optional[str]) -> ActionResult:
        return self.set_filter("status", status)

    def apply_priority_filter(self, priority: Optional[str]) -> ActionResult:
        return self.set_filter("priority", priority)

    def apply_prd_filter(self, has_prd: Optional[bool]) -> ActionResult:
        return self.set_filter("prd_source", has_prd)

    def apply_subtasks_filter(self, has_subtasks: Optional[bool]) -> ActionResult:
        return self.set_filter("has_subtasks", has_subtasks)

    def apply_dependencies_filter(self, has_dependencies: Optional[bool]) -> ActionResult:
        return self.set_filter("has_dependencies", has_dependencies)

    def cycle_filter(self, slot: str) -> ActionResult:
        if slot not in FILTER_SLOTS:
            return ActionResult.fail(f"Unknown filter slot: {slot}")
        key, cycle = FILTER_SLOTS[slot]
        return self.set_filter(key, next_in_cycle(cycle, getattr(self.state.filters, key)))

    def handle_filter_key(self, key: str) -> ActionResult:
        """Keys accepted while filter mode is on."""
        if key in FILTER_SLOTS:
            return self.cycle_filter(key)
        if key in ("c", "C"):
            return self.clear_all_filters()
        if key == "escape":
            return self.exit_filter_mode()
        return ActionResult.fail(f"Unknown filter key: {key}")

    def apply_filters(self) -> None:
        self.state.recompute_view()

    def clear_all_filters(self) -> ActionResult:
        self.state.filters.clear()
        self.state.search_query = ""
        self.state.restore_view()
        return ActionResult(True, message="All filters cleared")

    def get_active_filters(self) -> Dict[str, Any]:
        return self.state.filters.active()

    # ------------------------------------------------------------------ search

    def set_search_query(self, query: str) -> ActionResult:
        self.state.search_query = (query or "").strip()
        if self.state.search_query or not self.state.filters.is_empty():
            self.apply_filters()
        else:
            self.state.restore_view()
        message = f'Searching for: "{self.state.search_query}"' if self.state.search_query else "Search cleared"
        return ActionResult(True, message=message, data={"query": self.state.search_query})

    def open_search(self) -> ActionResult:
        self.state.is_search_mode = True
        self.modal.open(
            SEARCH,
            prompt="Search",
            initial=self.state.search_query,
            on_commit=self._commit_search,
            on_cancel=self._cancel_search,
        )
        return ActionResult(True, requires_input=True, message="Type to search, Enter to apply, ESC to cancel")

    def _commit_search(self, outcome: ModalOutcome) -> ActionResult:
        self.state.is_search_mode = False
        return self.set_search_query(outcome.value)

    def _cancel_search(self, outcome: ModalOutcome) -> ActionResult:
        self.state.is_search_mode = False
        return ActionResult(True, message="Search cancelled")

    # ------------------------------------------------------------------ focus

    def cycle_focus(self) -> ActionResult:
        index = FOCUS_MODES.index(self.state.focus_mode) if self.state.focus_mode in FOCUS_MODES else 0
        target = FOCUS_MODES[(index + 1) % len(FOCUS_MODES)]
        return self.set_focus(target)

    def set_focus(self, mode: str) -> ActionResult:
        if mode not in FOCUS_MODES:
            return ActionResult.fail(f"Invalid focus mode: {mode}")
        self.state.focus_mode = mode
        if mode != "details":
            self.overlays.close("details")
        if mode != "help":
            self.overlays.close("help")
        if mode == "details":
            task = self.state.layout.get_selected_task()
            if task is not None:
                self.overlays.push(TaskDetailsPopup(task, build_status_index(self.state.all_tasks())))
        elif mode == "help":
            self.overlays.push(HelpPopup())
        return ActionResult(True, message=f"Focus switched to: {mode}", data={"focus_mode": mode})

    # ------------------------------------------------------------------ state

    def get_board_state(self) -> Dict[str, Any]:
        return {
            "is_filter_mode": self.state.is_filter_mode,
            "is_search_mode": self.state.is_search_mode,
            "focus_mode": self.state.focus_mode,
            "active_filters": self.get_active_filters(),
            "search_query": self.state.search_query,
            "filtered_task_count": len(self.state.tasks),
            "original_task_count": len(self.state.all_tasks()),
        }

    def reset(self) -> ActionResult:
        self.state.is_filter_mode = False
        self.state.is_search_mode = False
        self.modal.reset()
        self.set_focus("board")
        self.clear_all_filters()
        return ActionResult(True, message="Board controls reset to default")


__all__ = ["BoardControlsHandler", "FILTER_SLOTS"]
