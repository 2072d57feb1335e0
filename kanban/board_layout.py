"""Three-lane board: owns the columns, buckets tasks, composes the full frame."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from core import Task
from core.status import LANE_STATUSES, canonical_status, lane_for_status
from util.display import fit, overlay
from util.responsive import COLUMN_GUTTER, board_geometry

from .column import KanbanColumn
from .terminal import CLEAR_SCREEN, HIDE_CURSOR


@dataclass
class BoardStatistics:
    status_counts: Dict[str, int] = field(default_factory=dict)
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_percentage: int = 0
    folded_tasks: int = 0


def completion_percentage(done: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half rounds up.
    return int(math.floor(done / total * 100 + 0.5))


class BoardLayout:
    def __init__(self, width: int = 80, height: int = 24):
        self.terminal_width = width
        self.terminal_height = height
        self.status_order = LANE_STATUSES
        self.current_column_index = 0
        self.folded_count = 0
        geometry = board_geometry(width, height)
        self.columns: Dict[str, KanbanColumn] = {
            status: KanbanColumn(status, geometry.column_width, geometry.column_height) for status in self.status_order
        }
        self.get_current_column().set_active(True)

    # ------------------------------------------------------------------ columns

    def get_column(self, status: str) -> Optional[KanbanColumn]:
        return self.columns.get(status)

    def get_current_column(self) -> KanbanColumn:
        return self.columns[self.status_order[self.current_column_index]]

    def get_current_status(self) -> str:
        return self.status_order[self.current_column_index]

    def get_selected_task(self) -> Optional[Task]:
        return self.get_current_column().get_selected_task()

    def set_current_column(self, index: int) -> None:
        """Deactivate the current lane, activate ``index`` and select its first task."""
        current = self.get_current_column()
        current.clear_selection()
        current.set_active(False)
        self.current_column_index = index % len(self.status_order)
        column = self.get_current_column()
        column.set_active(True)
        if column.has_tasks():
            column.set_selected_task(0)
            column.ensure_selection_visible()

    def move_to_next_column(self) -> None:
        self.set_current_column(self.current_column_index + 1)

    def move_to_previous_column(self) -> None:
        self.set_current_column(self.current_column_index - 1)

    # ------------------------------------------------------------------ tasks

    def load_tasks(self, tasks: Iterable[Task]) -> None:
        """Bucket tasks into lanes; the selected task keeps its selection if still present."""
        current = self.get_current_column()
        previous = current.get_selected_task()
        buckets: Dict[str, List[Task]] = {status: [] for status in self.status_order}
        folded = 0
        for task in tasks:
            token = canonical_status(task.status)
            if token not in LANE_STATUSES:
                folded += 1
            buckets[lane_for_status(token)].append(task)
        self.folded_count = folded
        for status, column in self.columns.items():
            column.set_tasks(buckets[status])
            column.folded_count = folded if status == self.status_order[0] else 0
            if not column.is_active:
                column.clear_selection()
            column.clamp()
        if previous is not None and self.select_task_id(previous.id, switch_column=False):
            return
        if current.has_tasks() and current.selected_index < 0:
            current.set_selected_task(0)
            current.ensure_selection_visible()

    def select_task_id(self, task_id, switch_column: bool = True) -> bool:
        """Select the task with ``task_id``; optionally switch to the lane holding it."""
        current = self.get_current_column()
        index = current.index_of(task_id)
        if index >= 0:
            current.set_selected_task(index)
            current.ensure_selection_visible()
            return True
        if not switch_column:
            return False
        for column_index, status in enumerate(self.status_order):
            column = self.columns[status]
            index = column.index_of(task_id)
            if index < 0:
                continue
            self.set_current_column(column_index)
            column.set_selected_task(index)
            column.ensure_selection_visible()
            return True
        return False

    def all_visible_tasks(self) -> List[Task]:
        tasks: List[Task] = []
        for status in self.status_order:
            tasks.extend(self.columns[status].tasks)
        return tasks

    # ------------------------------------------------------------------ geometry

    def resize(self, width: int, height: int) -> bool:
        """Recompute lane sizes; returns False when nothing changed."""
        if (width, height) == (self.terminal_width, self.terminal_height):
            return False
        self.terminal_width = width
        self.terminal_height = height
        geometry = board_geometry(width, height)
        for column in self.columns.values():
            column.width = geometry.column_width
            column.height = geometry.column_height
            column.clamp()
        return True

    # ------------------------------------------------------------------ rendering

    def generate_board_lines(self) -> List[str]:
        rendered = [self.columns[status].render() for status in self.status_order]
        column_width = self.get_current_column().width
        max_height = max((len(lines) for lines in rendered), default=0)
        gutter = " " * COLUMN_GUTTER
        board: List[str] = []
        for row in range(max_height):
            cells = [lines[row] if row < len(lines) else " " * column_width for lines in rendered]
            board.append(gutter.join(cells))
        return board

    def render(self, status_bar_line: str = "", overlays: Sequence = ()) -> List[str]:
        """Full frame of ``terminal_height`` rows; overlays are drawn in stack order."""
        height = max(1, self.terminal_height)
        rows = self.generate_board_lines()[: max(0, height - 1)]
        rows.extend([""] * (height - 1 - len(rows)))
        rows.append(status_bar_line)
        for popup in overlays:
            geometry = popup.geometry(self.terminal_width, self.terminal_height)
            for offset, line in enumerate(popup.render(self.terminal_width, self.terminal_height)):
                row = geometry.y + offset
                if 0 <= row < height:
                    rows[row] = overlay(rows[row], line, geometry.x)
        return [fit(row, self.terminal_width) for row in rows]

    def render_screen(self, status_bar_line: str = "", overlays: Sequence = ()) -> str:
        return CLEAR_SCREEN + HIDE_CURSOR + "\n".join(self.render(status_bar_line, overlays))

    def get_statistics(self) -> BoardStatistics:
        counts = {status: self.columns[status].get_task_count() for status in self.status_order}
        total = sum(counts.values())
        done = counts.get("done", 0)
        return BoardStatistics(
            status_counts=counts,
            total_tasks=total,
            completed_tasks=done,
            completion_percentage=completion_percentage(done, total),
            folded_tasks=self.folded_count,
        )


__all__ = ["BoardLayout", "BoardStatistics", "completion_percentage"]
