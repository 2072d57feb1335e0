"""Centred scrollable popups drawn over the board."""

from typing import Any, Dict, List, Optional

from core import Task
from util.display import center, pad_right, truncate, wrap_words
from util.responsive import PopupGeometry, popup_geometry

from .board_layout import BoardStatistics
from .card_formatter import create_progress_indicator, format_description, format_status, priority_label, status_display
from .terminal import left_vertical_line, rounded_line, separator_line, vertical_line
from .themes import paint

CONTROLS_HINT = "C: Close | ↑↓: Scroll"
# Top border, title, separator / separator, hint, bottom border.
CHROME_ROWS = 6


class ScrollablePopup:
    """Bordered panel with a title bar, its own scroll offset and a control hint line."""

    kind = "popup"
    title = ""

    def __init__(self):
        self.scroll_offset = 0
        self.max_scroll = 0

    def geometry(self, terminal_width: int, terminal_height: int) -> PopupGeometry:
        return popup_geometry(terminal_width, terminal_height)

    def build_content(self, width: int) -> List[str]:
        raise NotImplementedError

    def content_rows(self, terminal_width: int, terminal_height: int) -> int:
        return max(1, self.geometry(terminal_width, terminal_height).height - CHROME_ROWS)

    def scroll_up(self, lines: int = 1) -> bool:
        target = max(0, self.scroll_offset - lines)
        changed = target != self.scroll_offset
        self.scroll_offset = target
        return changed

    def scroll_down(self, lines: int = 1) -> bool:
        target = min(self.max_scroll, self.scroll_offset + lines)
        changed = target != self.scroll_offset
        self.scroll_offset = max(0, target)
        return changed

    def render(self, terminal_width: int, terminal_height: int) -> List[str]:
        geometry = self.geometry(terminal_width, terminal_height)
        width = geometry.width
        inner = max(0, width - 4)
        rows = self.content_rows(terminal_width, terminal_height)
        content = self.build_content(inner)
        self.max_scroll = max(0, len(content) - rows)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll)
        window = content[self.scroll_offset : self.scroll_offset + rows]
        window.extend([""] * (rows - len(window)))

        hint = CONTROLS_HINT
        if self.max_scroll:
            last = min(len(content), self.scroll_offset + rows)
            hint = f"{hint} | {self.scroll_offset + 1}-{last}/{len(content)}"

        lines = [rounded_line(width, top=True)]
        lines.append(vertical_line(paint("popup.title", truncate(self.title, inner)), width))
        lines.append(separator_line(width))
        lines.extend(left_vertical_line(" " + truncate(line, inner) + " ", width) for line in window)
        lines.append(separator_line(width))
        lines.append(vertical_line(paint("text.dim", center(truncate(hint, inner), inner)), width))
        lines.append(rounded_line(width, top=False))
        return lines


def _section(title: str) -> str:
    return paint("popup.section", title)


class TaskDetailsPopup(ScrollablePopup):
    kind = "details"

    def __init__(self, task: Task, task_statuses: Optional[Dict[Any, str]] = None):
        super().__init__()
        self.task = task
        self.task_statuses = task_statuses or {}

    @property
    def title(self) -> str:
        return f"Task #{self.task.id} Details"

    def build_content(self, width: int) -> List[str]:
        task = self.task
        body = max(1, width - 3)
        lines: List[str] = [_section("📋 TITLE:")]
        lines.extend(f"   {paint('popup.value', row)}" for row in wrap_words(task.title or "Untitled Task", body))
        lines.append("")

        lines.append(_section("📊 STATUS & METADATA:"))
        lines.append(f"   Status: {format_status(task.status)}     Priority: {priority_label(task.priority)}")
        if task.dependencies:
            deps = []
            for dep_id in task.dependencies:
                glyph, _, _ = status_display(self.task_statuses.get(dep_id, ""))
                deps.append(f"{glyph} #{dep_id}")
            lines.append(f"   🔗 Dependencies: {', '.join(deps)}")
        if task.prd_source is not None:
            lines.append(f"   📄 PRD Source: {task.prd_source.file_name or 'Unknown'}")
            if task.prd_source.file_path:
                lines.append(f"   📁 Path: {paint('text.muted', task.prd_source.file_path)}")
        lines.append("")

        for heading, text in (
            ("📝 DESCRIPTION:", task.description),
            ("🔧 IMPLEMENTATION DETAILS:", task.details),
            ("🧪 TEST STRATEGY:", task.test_strategy),
        ):
            if not text:
                continue
            lines.append(_section(heading))
            lines.extend(f"   {row}" for row in format_description(text, body, max_lines=0))
            lines.append("")

        if task.subtasks:
            done = task.subtasks_done
            lines.append(_section(f"✅ SUBTASKS ({done}/{len(task.subtasks)}):"))
            lines.append(f"   {create_progress_indicator(done, len(task.subtasks))}")
            for subtask in task.subtasks:
                glyph, _, _ = status_display(subtask.status)
                lines.append(f"   {glyph} {task.id}.{subtask.id} {truncate(subtask.title, max(1, body - 8))}")
            lines.append("")
        return lines


HELP_SECTIONS = (
    (
        "🧭 NAVIGATION & BASIC CONTROLS:",
        (
            ("← →", "Move between columns (Pending, In Progress, Done)"),
            ("↑ ↓", "Move between tasks within a column"),
            ("Tab", "Cycle focus: board, details, help"),
            ("B", "Go back to the previous position"),
        ),
    ),
    (
        "📜 COLUMN SCROLLING:",
        (
            ("PgUp/PgDn", "Scroll column up/down"),
            ("Ctrl+↑/↓", "Alternative column scrolling"),
        ),
    ),
    (
        "🔄 STATUS CHANGES:",
        (
            ("1", "Move selected task to Pending"),
            ("2", "Move selected task to In Progress"),
            ("3", "Move selected task to Done"),
            ("U", "Undo the last status change"),
        ),
    ),
    (
        "📋 TASK OPERATIONS:",
        (
            ("V", "View task details"),
            ("D", "Delete task (asks for confirmation)"),
            ("E", "Edit task title"),
            ("I", "Show task info"),
        ),
    ),
    (
        "🎛  BOARD OPERATIONS:",
        (
            ("R", "Refresh board from tasks.json"),
            ("S", "Show board statistics"),
            ("F", "Toggle filter mode (1-5 set filters, C clear)"),
            ("/", "Search tasks"),
        ),
    ),
    (
        "ℹ  HELP & EXIT:",
        (
            ("H / ?", "Show this help"),
            ("Q", "Quit the board"),
        ),
    ),
    (
        "🪟 POPUP CONTROLS:",
        (
            ("C", "Close popup"),
            ("Escape", "Close popup"),
            ("↑ ↓", "Scroll popup content"),
        ),
    ),
    (
        "🎨 VISUAL INDICATORS:",
        (
            ("╔═══╗", "Active column (double borders)"),
            ("╭───╮", "Inactive columns (rounded corners)"),
            ("🟣🔴🟡🟢", "Priority (Critical, High, Medium, Low)"),
            ("D:X", "Dependencies count"),
            ("Sub:X", "Subtasks count"),
            ("+N other", "Blocked/deferred/cancelled tasks shown in Pending"),
        ),
    ),
)


class HelpPopup(ScrollablePopup):
    kind = "help"
    title = "📚 TASKHERO KANBAN BOARD - HELP & CONTROLS"

    def build_content(self, width: int) -> List[str]:
        lines: List[str] = []
        for heading, entries in HELP_SECTIONS:
            lines.append(_section(heading))
            for key, text in entries:
                lines.append(paint("text.dim", f"   {key:<10}: {text}"))
            lines.append("")
        return lines


class StatisticsPopup(ScrollablePopup):
    kind = "statistics"
    title = "📈 BOARD STATISTICS"

    def __init__(self, stats: BoardStatistics):
        super().__init__()
        self.stats = stats

    def build_content(self, width: int) -> List[str]:
        stats = self.stats
        lines = [_section("TASKS BY LANE:")]
        for status, count in stats.status_counts.items():
            glyph, name, style = status_display(status)
            lines.append(f"   {glyph} {pad_right(paint(style, name), 14)} {count}")
        if stats.folded_tasks:
            lines.append(f"   {paint('text.muted', f'(+{stats.folded_tasks} blocked/deferred/cancelled in Pending)')}")
        lines.append("")
        lines.append(_section("PROGRESS:"))
        lines.append(f"   Total: {stats.total_tasks}   Completed: {stats.completed_tasks}")
        bar = create_progress_indicator(stats.completed_tasks, stats.total_tasks, width=20)
        lines.append(f"   {bar or '0%'}")
        return lines


__all__ = ["CONTROLS_HINT", "ScrollablePopup", "TaskDetailsPopup", "HelpPopup", "StatisticsPopup"]
