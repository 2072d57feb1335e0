"""Explicit board session state shared by every handler."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from core import Task
from infrastructure.task_store import TaskDocument, TaskStoreError, write_tasks

from .board_layout import BoardLayout
from .filters import FilterSet, apply_filters

FOCUS_MODES = ("board", "details", "help")
NAVIGATION_HISTORY_LIMIT = 10
STATUS_HISTORY_LIMIT = 20
OPERATION_LOG_LIMIT = 10


@dataclass
class ActionResult:
    """Outcome of a handler action; ``reason`` is set when ``success`` is False."""

    success: bool
    message: str = ""
    reason: str = ""
    task: Optional[Task] = None
    incomplete_dependencies: List[Any] = field(default_factory=list)
    requires_confirmation: bool = False
    requires_input: bool = False
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def fail(cls, reason: str, **kwargs) -> "ActionResult":
        return cls(success=False, reason=reason, **kwargs)


@dataclass
class NavigationEntry:
    type: str
    data: Dict[str, int]
    timestamp: float = field(default_factory=time.time)


@dataclass
class StatusChange:
    task_id: Any
    old_status: str
    new_status: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class OperationRecord:
    operation: str
    task_id: Any
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


def push_capped(stack: list, item, limit: int) -> None:
    stack.append(item)
    del stack[:-limit]


@dataclass
class BoardState:
    layout: BoardLayout = field(default_factory=BoardLayout)
    document: TaskDocument = field(default_factory=TaskDocument)
    tasks_path: Optional[Path] = None
    # Current (possibly filtered) view.
    tasks: List[Task] = field(default_factory=list)
    # Unfiltered snapshot, captured on first filter application.
    original_tasks: Optional[List[Task]] = None
    filters: FilterSet = field(default_factory=FilterSet)
    search_query: str = ""
    is_filter_mode: bool = False
    is_search_mode: bool = False
    focus_mode: str = "board"
    navigation_history: List[NavigationEntry] = field(default_factory=list)
    status_history: List[StatusChange] = field(default_factory=list)
    operation_log: List[OperationRecord] = field(default_factory=list)

    @classmethod
    def from_tasks(cls, tasks: List[Task], tasks_path: Optional[Path] = None, width: int = 80, height: int = 24) -> "BoardState":
        state = cls(layout=BoardLayout(width, height), tasks_path=tasks_path)
        state.load_document(TaskDocument(tasks=list(tasks), data={}))
        return state

    @property
    def current_column_index(self) -> int:
        return self.layout.current_column_index

    def all_tasks(self) -> List[Task]:
        """Full unfiltered task list; used for persistence and the dependency gate."""
        if self.original_tasks is not None:
            return self.original_tasks
        return self.tasks

    def find_task(self, task_id) -> Optional[Task]:
        for task in self.all_tasks():
            if task.id == task_id:
                return task
        return None

    def is_filtered(self) -> bool:
        return not self.filters.is_empty() or bool(self.search_query)

    def load_document(self, document: TaskDocument) -> None:
        self.document = document
        self.tasks = list(document.tasks)
        self.original_tasks = None
        self.reload_lanes()

    def recompute_view(self) -> None:
        if self.original_tasks is None:
            self.original_tasks = list(self.tasks)
        self.tasks = apply_filters(self.original_tasks, self.filters, self.search_query)
        self.layout.load_tasks(self.tasks)

    def restore_view(self) -> None:
        if self.original_tasks is not None:
            self.tasks = list(self.original_tasks)
            self.original_tasks = None
        self.layout.load_tasks(self.tasks)

    def reload_lanes(self) -> None:
        if self.is_filtered():
            self.recompute_view()
        else:
            self.layout.load_tasks(self.tasks)

    def remove_task(self, task_id) -> Optional[Task]:
        removed = None
        for collection in (self.tasks, self.original_tasks, self.document.tasks):
            if collection is None:
                continue
            for idx, task in enumerate(collection):
                if task.id == task_id:
                    removed = collection.pop(idx)
                    break
        return removed

    def persist(self) -> None:
        """Write the full task list back; raises TaskStoreError and leaves meta untouched on failure."""
        if self.tasks_path is None:
            raise TaskStoreError("No tasks file loaded")
        previous_meta = self.document.data.get("meta")
        snapshot = dict(previous_meta) if isinstance(previous_meta, dict) else previous_meta
        self.document.tasks = list(self.all_tasks())
        self.document.touch()
        try:
            write_tasks(self.tasks_path, self.document)
        except TaskStoreError:
            if snapshot is None:
                self.document.data.pop("meta", None)
            else:
                self.document.data["meta"] = snapshot
            raise

    def record_operation(self, operation: str, task_id, **details) -> None:
        push_capped(self.operation_log, OperationRecord(operation, task_id, details), OPERATION_LOG_LIMIT)


__all__ = [
    "FOCUS_MODES",
    "NAVIGATION_HISTORY_LIMIT",
    "STATUS_HISTORY_LIMIT",
    "OPERATION_LOG_LIMIT",
    "ActionResult",
    "NavigationEntry",
    "StatusChange",
    "OperationRecord",
    "BoardState",
    "push_capped",
]
