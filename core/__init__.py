from .status import (
    Status,
    ALL_STATUSES,
    LANE_STATUSES,
    PRIORITIES,
    SIDE_STATUSES,
    canonical_status,
    lane_for_status,
    normalize_task_status,
)
from .task import PrdSource, Subtask, Task
from .dependency_validator import (
    build_status_index,
    get_blocked_by_dependencies,
    get_dependent_tasks,
)

__all__ = [
    "Status",
    "ALL_STATUSES",
    "LANE_STATUSES",
    "PRIORITIES",
    "SIDE_STATUSES",
    "canonical_status",
    "lane_for_status",
    "normalize_task_status",
    "Task",
    "Subtask",
    "PrdSource",
    # Dependencies
    "build_status_index",
    "get_blocked_by_dependencies",
    "get_dependent_tasks",
]
