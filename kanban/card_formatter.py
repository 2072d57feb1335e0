"""Badges and text blocks used by lane cards, popups and the status bar."""

from typing import Any, List, Optional, Sequence, Tuple

from core import Status, Task
from core.task import PrdSource, Subtask
from util.display import truncate, visual_length, wrap_words

from .themes import paint

PRIORITY_DISPLAY = {
    "critical": ("🟣", "Critical", "Crit", "C"),
    "high": ("🔴", "High", "High", "H"),
    "medium": ("🟡", "Medium", "Med", "M"),
    "low": ("🟢", "Low", "Low", "L"),
}
UNTITLED = "Untitled Task"


def status_display(status: str) -> Tuple[str, str, str]:
    """(glyph, display name, style class) for any status token."""
    token = (status or "").strip().lower()
    for candidate in Status:
        if candidate.code == token:
            return candidate.glyph, candidate.label, f"status.{candidate.code}"
    return "❓", (status or "unknown").upper(), "text.muted"


def format_status(status: str) -> str:
    glyph, name, style = status_display(status)
    return f"{glyph} {paint(style, name)}"


def format_priority(priority: Optional[str], compact: bool = False) -> str:
    entry = PRIORITY_DISPLAY.get((priority or "").lower())
    if entry is None:
        symbol, text, style = "⚪", "?" if compact else "None", "priority.none"
    else:
        symbol, _, short, letter = entry
        text, style = (letter if compact else short), f"priority.{priority.lower()}"
    if compact:
        return f"{symbol}{paint(style, text)}"
    return f"{symbol} {paint(style, text)}"


def priority_label(priority: Optional[str]) -> str:
    entry = PRIORITY_DISPLAY.get((priority or "").lower())
    if entry is None:
        return f"⚪ {priority or 'None'}"
    return f"{entry[0]} {paint('priority.' + priority.lower(), entry[1])}"


def format_dependencies(dependencies: Sequence[Any], compact: bool = False) -> str:
    if not dependencies:
        return ""
    count = len(dependencies)
    text = f"D:{count}" if compact else f"Deps: {count}"
    # More dependencies, hotter colour.
    if count > 3:
        return paint("badge.deps.high", text)
    if count > 1:
        return paint("badge.deps.mid", text)
    return paint("badge.deps.low", text)


def format_prd_source(prd_source: Optional[PrdSource], compact: bool = False) -> str:
    if prd_source is None:
        return ""
    if compact:
        return paint("badge.prd", "📄")
    name = prd_source.file_name or "PRD"
    return paint("badge.prd", "📄 ") + paint("text.muted", truncate(name, 15))


def format_subtasks(subtasks: Sequence[Subtask], compact: bool = False) -> str:
    if not subtasks:
        return ""
    count = len(subtasks)
    return paint("badge.subtasks", f"S:{count}" if compact else f"Sub: {count}")


def format_task_title(title: str, max_width: int, task_id: Any) -> str:
    id_text = paint("id", f"#{task_id}")
    available = max_width - visual_length(id_text) - 1
    if available <= 0:
        return truncate(id_text, max_width)
    return f"{id_text} {truncate(title or UNTITLED, available)}"


def create_metadata_line(task: Task, max_width: int, compact: bool = False) -> str:
    parts = [
        format_priority(task.priority, compact),
        format_dependencies(task.dependencies, compact),
        format_prd_source(task.prd_source, compact),
        format_subtasks(task.subtasks, compact),
    ]
    return truncate(" ".join(p for p in parts if p), max_width)


def create_compact_summary(task: Task, max_width: int) -> str:
    """Single-line card for narrow lanes: ``#id badges title``."""
    parts = [
        paint("id", f"#{task.id}"),
        format_priority(task.priority, True),
        format_dependencies(task.dependencies, True),
        format_prd_source(task.prd_source, True),
    ]
    prefix = " ".join(p for p in parts if p)
    available = max_width - visual_length(prefix) - 1
    if available <= 0:
        return truncate(prefix, max_width)
    return f"{prefix} {truncate(task.title or 'Untitled', available)}"


def format_description(description: str, width: int, max_lines: int = 3) -> List[str]:
    return wrap_words(description, width, max_lines=max_lines)


def create_progress_indicator(completed: int, total: int, width: int = 10) -> str:
    if total <= 0:
        return ""
    ratio = completed / total
    filled = round(ratio * width)
    bar = paint("progress.filled", "█" * filled) + paint("progress.empty", "░" * (width - filled))
    return f"{bar} {round(ratio * 100)}%"


__all__ = [
    "PRIORITY_DISPLAY",
    "status_display",
    "format_status",
    "format_priority",
    "priority_label",
    "format_dependencies",
    "format_prd_source",
    "format_subtasks",
    "format_task_title",
    "create_metadata_line",
    "create_compact_summary",
    "format_description",
    "create_progress_indicator",
]
