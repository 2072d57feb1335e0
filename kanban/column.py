"""A single status lane: task subset, scroll viewport, selection cursor, card rendering."""

from dataclasses import dataclass
from typing import List, Optional

from core import Task
from util.display import center, fit, strip_ansi, truncate
from util.responsive import COMPACT_CARD_WIDTH, COMPACT_METADATA_WIDTH

from .card_formatter import create_compact_summary, create_metadata_line, format_task_title, status_display
from .terminal import double_line, double_vertical_line, rounded_line, separator_line, vertical_line
from .themes import paint


@dataclass(frozen=True)
class ScrollInfo:
    start_task: int
    end_task: int
    total_tasks: int
    can_scroll_up: bool
    can_scroll_down: bool


class KanbanColumn:
    def __init__(self, status: str, width: int, height: int):
        self.status = status
        self.width = width
        self.height = height
        self.tasks: List[Task] = []
        self.selected_index = -1
        self.is_active = False
        self.scroll_offset = 0
        # Tasks with a non-lane status bucketed here (pending lane only).
        self.folded_count = 0

    @property
    def max_visible_tasks(self) -> int:
        # Header takes 3 rows plus the bottom border; cards are separated by one blank row.
        return max(1, (self.height - 4 + 1) // 2)

    @property
    def max_scroll(self) -> int:
        return max(0, len(self.tasks) - self.max_visible_tasks)

    def set_tasks(self, tasks: Optional[List[Task]]) -> None:
        """Replace the lane contents; scroll and selection are left to the caller."""
        self.tasks = list(tasks or [])

    def set_selected_task(self, index: int) -> None:
        self.selected_index = index

    def set_active(self, active: bool) -> None:
        self.is_active = active

    def clear_selection(self) -> None:
        self.selected_index = -1

    def has_tasks(self) -> bool:
        return bool(self.tasks)

    def get_task_count(self) -> int:
        return len(self.tasks)

    def get_task(self, index: int) -> Optional[Task]:
        if 0 <= index < len(self.tasks):
            return self.tasks[index]
        return None

    def get_selected_task(self) -> Optional[Task]:
        return self.get_task(self.selected_index)

    def index_of(self, task_id) -> int:
        for idx, task in enumerate(self.tasks):
            if task.id == task_id:
                return idx
        return -1

    # ------------------------------------------------------------------ scrolling

    def scroll_up(self) -> bool:
        if self.scroll_offset <= 0:
            return False
        self.scroll_offset -= 1
        self._keep_selection_in_window()
        return True

    def scroll_down(self) -> bool:
        if self.scroll_offset >= self.max_scroll:
            return False
        self.scroll_offset += 1
        self._keep_selection_in_window()
        return True

    def _keep_selection_in_window(self) -> None:
        if self.selected_index < 0:
            return
        last = min(len(self.tasks), self.scroll_offset + self.max_visible_tasks) - 1
        if self.selected_index < self.scroll_offset:
            self.selected_index = self.scroll_offset
        elif self.selected_index > last:
            self.selected_index = last

    def ensure_selection_visible(self) -> None:
        if self.selected_index < 0:
            return
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + self.max_visible_tasks:
            self.scroll_offset = self.selected_index - self.max_visible_tasks + 1
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll))

    def clamp(self) -> None:
        """Re-establish scroll and selection bounds after the list or the size changed."""
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll))
        if not self.tasks:
            self.selected_index = -1
        elif self.selected_index >= len(self.tasks):
            self.selected_index = len(self.tasks) - 1
        self.ensure_selection_visible()

    def get_scroll_info(self) -> Optional[ScrollInfo]:
        total = len(self.tasks)
        if total <= self.max_visible_tasks:
            return None
        return ScrollInfo(
            start_task=self.scroll_offset + 1,
            end_task=min(self.scroll_offset + self.max_visible_tasks, total),
            total_tasks=total,
            can_scroll_up=self.scroll_offset > 0,
            can_scroll_down=self.scroll_offset < total - self.max_visible_tasks,
        )

    # ------------------------------------------------------------------ selection

    def move_selection_up(self) -> bool:
        if not self.tasks:
            return False
        if self.selected_index <= 0:
            self.selected_index = len(self.tasks) - 1
        else:
            self.selected_index -= 1
        self.ensure_selection_visible()
        return True

    def move_selection_down(self) -> bool:
        if not self.tasks:
            return False
        if self.selected_index >= len(self.tasks) - 1:
            self.selected_index = 0
        else:
            self.selected_index += 1
        self.ensure_selection_visible()
        return True

    # ------------------------------------------------------------------ rendering

    def get_header_text(self) -> str:
        glyph, name, _ = status_display(self.status)
        count = len(self.tasks)
        info = self.get_scroll_info()
        if info:
            text = f"{glyph} {name} ({info.start_task}-{info.end_task}/{count})"
        else:
            text = f"{glyph} {name} ({count})"
        if self.folded_count:
            text += f" +{self.folded_count} other"
        return text

    def _header(self) -> str:
        _, _, style = status_display(self.status)
        inner = self.width - 2
        return paint(style, center(truncate(self.get_header_text(), inner), inner))

    def _wrap(self, content: str) -> str:
        if self.is_active:
            return double_vertical_line(content, self.width)
        return vertical_line(content, self.width)

    def render(self) -> List[str]:
        inner = max(0, self.width - 2)
        lines: List[str] = []
        if self.is_active:
            lines.append(double_line(self.width, top=True))
            lines.append(self._wrap(self._header()))
            lines.append(separator_line(self.width, double=True))
        else:
            lines.append(rounded_line(self.width, top=True))
            lines.append(self._wrap(self._header()))
            lines.append(separator_line(self.width))

        content_height = max(3, self.height - 4)
        visible = self.tasks[self.scroll_offset : self.scroll_offset + self.max_visible_tasks]
        body: List[str] = []

        if not visible:
            top_pad = (content_height - 1) // 2
            body.extend([""] * top_pad)
            body.append(center(paint("text.muted", "No tasks"), inner))
        else:
            info = self.get_scroll_info()
            if info and info.can_scroll_up:
                body.append(center(paint("text.dim", "↑ More tasks above"), max(0, self.width - 4)))
            below = 1 if info and info.can_scroll_down else 0
            limit = content_height - below
            for offset, task in enumerate(visible):
                selected = self.scroll_offset + offset == self.selected_index
                for card_line in self.render_task_card(task, selected):
                    if len(body) >= limit:
                        break
                    body.append(card_line)
                if offset < len(visible) - 1 and len(body) < limit:
                    body.append("")
                if len(body) >= limit:
                    break
            if below:
                body.append(center(paint("text.dim", "↓ More tasks below"), max(0, self.width - 4)))

        body.extend([""] * (content_height - len(body)))
        lines.extend(self._wrap(truncate(line, inner)) for line in body[:content_height])
        lines.append(double_line(self.width, top=False) if self.is_active else rounded_line(self.width, top=False))
        return lines

    def render_task_card(self, task: Task, is_selected: bool = False) -> List[str]:
        compact_meta = self.width < COMPACT_METADATA_WIDTH
        if is_selected:
            card_width = self.width - 4
            text_width = max(0, card_width - 2)
            if self.width < COMPACT_CARD_WIDTH:
                rows = [create_compact_summary(task, text_width)]
            else:
                rows = [format_task_title(task.title, text_width, task.id)]
                meta = create_metadata_line(task, text_width, compact_meta)
                if meta:
                    rows.append(meta)
            card = [rounded_line(card_width, top=True)]
            for row in rows:
                card.append(vertical_line(paint("selected", fit(strip_ansi(row), text_width)), card_width))
            card.append(rounded_line(card_width, top=False))
            return card

        content_width = max(0, self.width - 6)
        if self.width < COMPACT_CARD_WIDTH:
            return [fit(create_compact_summary(task, content_width), content_width)]
        card = [fit(format_task_title(task.title, content_width, task.id), content_width)]
        meta = create_metadata_line(task, content_width, compact_meta)
        if meta:
            card.append(fit(meta, content_width))
        return card


__all__ = ["KanbanColumn", "ScrollInfo"]
