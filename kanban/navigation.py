"""Cursor movement across lanes and tasks, with bounded back-history."""

from typing import Any, Dict, List

from .board_state import NAVIGATION_HISTORY_LIMIT, ActionResult, BoardState, NavigationEntry, push_capped


class NavigationHandler:
    def __init__(self, state: BoardState, max_history: int = NAVIGATION_HISTORY_LIMIT):
        self.state = state
        self.max_history = max_history

    @property
    def layout(self):
        return self.state.layout

    def _remember_column(self) -> None:
        self.add_to_history("column", {"column": self.layout.current_column_index})

    def _remember_task(self) -> None:
        column = self.layout.get_current_column()
        self.add_to_history("task", {"column": self.layout.current_column_index, "task": column.selected_index})

    def add_to_history(self, kind: str, data: Dict[str, int]) -> None:
        push_capped(self.state.navigation_history, NavigationEntry(kind, data), self.max_history)

    def get_history(self) -> List[NavigationEntry]:
        return list(self.state.navigation_history)

    def clear_history(self) -> None:
        self.state.navigation_history.clear()

    # ------------------------------------------------------------------ movement

    def move_to_next_column(self) -> ActionResult:
        self._remember_column()
        self.layout.move_to_next_column()
        return ActionResult(True, data={"current_column": self.layout.get_current_status()})

    def move_to_previous_column(self) -> ActionResult:
        self._remember_column()
        self.layout.move_to_previous_column()
        return ActionResult(True, data={"current_column": self.layout.get_current_status()})

    def _move_selection(self, down: bool) -> ActionResult:
        column = self.layout.get_current_column()
        if not column.has_tasks():
            return ActionResult.fail("No tasks in column")
        self._remember_task()
        moved = column.move_selection_down() if down else column.move_selection_up()
        return ActionResult(moved, task=column.get_selected_task(), data={"column": column.status})

    def move_selection_up(self) -> ActionResult:
        return self._move_selection(down=False)

    def move_selection_down(self) -> ActionResult:
        return self._move_selection(down=True)

    def jump_to_column(self, status: str) -> ActionResult:
        if status not in self.layout.status_order:
            return ActionResult.fail(f"Invalid status: {status}")
        self._remember_column()
        self.layout.set_current_column(self.layout.status_order.index(status))
        column = self.layout.get_current_column()
        return ActionResult(True, data={"current_column": status, "has_selection": column.has_tasks()})

    def jump_to_task(self, task_id: Any) -> ActionResult:
        for index, status in enumerate(self.layout.status_order):
            column = self.layout.columns[status]
            task_index = column.index_of(task_id)
            if task_index < 0:
                continue
            self._remember_task()
            if index != self.layout.current_column_index:
                self.layout.set_current_column(index)
            column.set_selected_task(task_index)
            column.ensure_selection_visible()
            return ActionResult(True, task=column.get_task(task_index), data={"column": status, "task_index": task_index})
        return ActionResult.fail(f"Task #{task_id} not found")

    def go_back(self) -> ActionResult:
        """Pop the last recorded position and return to it."""
        history = self.state.navigation_history
        if not history:
            return ActionResult.fail("No navigation history")
        entry = history.pop()
        if entry.type == "column":
            self.layout.set_current_column(entry.data["column"])
            return ActionResult(True, data={"type": "column", "current_column": self.layout.get_current_status()})
        if entry.type == "task":
            column_index = entry.data["column"]
            if column_index != self.layout.current_column_index:
                self.layout.set_current_column(column_index)
            column = self.layout.get_current_column()
            task_index = entry.data["task"]
            if 0 <= task_index < column.get_task_count():
                column.set_selected_task(task_index)
                column.ensure_selection_visible()
            else:
                column.clear_selection()
            return ActionResult(
                True,
                task=column.get_selected_task(),
                data={"type": "task", "current_column": self.layout.get_current_status()},
            )
        return ActionResult.fail("Unknown navigation type")

    def get_navigation_state(self) -> Dict[str, Any]:
        column = self.layout.get_current_column()
        selected = column.get_selected_task()
        return {
            "current_column_index": self.layout.current_column_index,
            "current_status": self.layout.get_current_status(),
            "has_selection": selected is not None,
            "selected_task": selected,
            "column_task_count": column.get_task_count(),
            "selected_task_index": column.selected_index,
        }

    def reset(self) -> ActionResult:
        self.layout.set_current_column(0)
        self.clear_history()
        return ActionResult(True, data={"current_column": self.layout.get_current_status()})


__all__ = ["NavigationHandler"]
