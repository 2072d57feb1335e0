"""Dependency gate and dependency lookups.

Pure domain logic over task data. No I/O operations.
"""

from typing import Any, Dict, Iterable, List

from .status import canonical_status
from .task import Task


def build_status_index(tasks: Iterable[Task]) -> Dict[Any, str]:
    return {task.id: canonical_status(task.status) for task in tasks}


def get_blocked_by_dependencies(depends_on: List[Any], task_statuses: Dict[Any, str]) -> List[Any]:
    """Get list of incomplete dependencies that block a ``done`` transition.

    A dependency that does not resolve to a known task counts as incomplete.

    Returns:
        Dependency ids, in declaration order, whose task is not ``done``
    """
    blocking = []
    for dep_id in depends_on:
        if task_statuses.get(dep_id) != "done":
            blocking.append(dep_id)
    return blocking


def get_dependent_tasks(task_id: Any, tasks: Iterable[Task]) -> List[Task]:
    """Tasks that list ``task_id`` among their dependencies."""
    return [task for task in tasks if task_id in task.dependencies]


__all__ = [
    "build_status_index",
    "get_blocked_by_dependencies",
    "get_dependent_tasks",
]
