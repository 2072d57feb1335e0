"""Composable task filters and free-text search."""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from core import Task
from core.status import ALL_STATUSES, PRIORITIES, canonical_status

FILTER_KEYS = ("status", "priority", "prd_source", "has_subtasks", "has_dependencies")
FILTER_LABELS = {
    "status": "Status",
    "priority": "Priority",
    "prd_source": "PRD",
    "has_subtasks": "Subtasks",
    "has_dependencies": "Dependencies",
}

# Values stepped through by the filter-mode number keys; None means "off".
STATUS_CYCLE = (None,) + ALL_STATUSES
PRIORITY_CYCLE = (None,) + tuple(reversed(PRIORITIES))
FLAG_CYCLE = (None, True, False)


@dataclass
class FilterSet:
    status: Optional[str] = None
    priority: Optional[str] = None
    prd_source: Optional[bool] = None
    has_subtasks: Optional[bool] = None
    has_dependencies: Optional[bool] = None

    def active(self) -> Dict[str, object]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    def active_count(self) -> int:
        return len(self.active())

    def is_empty(self) -> bool:
        return not self.active()

    def clear(self) -> None:
        for key in FILTER_KEYS:
            setattr(self, key, None)

    def describe(self) -> List[str]:
        parts = []
        for key, value in self.active().items():
            if isinstance(value, bool):
                value = "Yes" if value else "No"
            parts.append(f"{FILTER_LABELS[key]}: {value}")
        return parts


def validate_filter(key: str, value) -> Optional[str]:
    """Return an error message for an unusable filter value, or None."""
    if key not in FILTER_KEYS:
        return f"Unknown filter: {key}"
    if value is None:
        return None
    if key == "status" and value not in ALL_STATUSES:
        return f"Invalid status: {value}"
    if key == "priority" and value not in PRIORITIES:
        return f"Invalid priority: {value}"
    if key in ("prd_source", "has_subtasks", "has_dependencies") and not isinstance(value, bool):
        return f"Invalid value for {FILTER_LABELS[key]}: {value!r}"
    return None


def next_in_cycle(cycle, current):
    try:
        index = cycle.index(current)
    except ValueError:
        index = 0
    return cycle[(index + 1) % len(cycle)]


def matches_search(task: Task, query: str) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return (
        needle in (task.title or "").lower()
        or needle in (task.description or "").lower()
        or needle in str(task.id).lower()
    )


def matches(task: Task, filters: FilterSet, search_query: str = "") -> bool:
    if filters.status is not None and canonical_status(task.status) != filters.status:
        return False
    if filters.priority is not None and task.priority != filters.priority:
        return False
    if filters.prd_source is not None and (task.prd_source is not None) != filters.prd_source:
        return False
    if filters.has_subtasks is not None and task.has_subtasks != filters.has_subtasks:
        return False
    if filters.has_dependencies is not None and task.has_dependencies != filters.has_dependencies:
        return False
    return matches_search(task, search_query)


def apply_filters(tasks: Iterable[Task], filters: FilterSet, search_query: str = "") -> List[Task]:
    return [task for task in tasks if matches(task, filters, search_query)]


__all__ = [
    "FILTER_KEYS",
    "FILTER_LABELS",
    "STATUS_CYCLE",
    "PRIORITY_CYCLE",
    "FLAG_CYCLE",
    "FilterSet",
    "validate_filter",
    "next_in_cycle",
    "matches_search",
    "matches",
    "apply_filters",
]
