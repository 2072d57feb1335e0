"""Status transitions: lane validation, dependency gate, write-back, undo history."""

import logging
from typing import Any, Dict, Iterable, List

from core import Task, build_status_index, get_blocked_by_dependencies, get_dependent_tasks
from core.status import LANE_STATUSES, canonical_status
from infrastructure.task_store import TaskStoreError

from .board_layout import completion_percentage
from .board_state import STATUS_HISTORY_LIMIT, ActionResult, BoardState, StatusChange, push_capped

logger = logging.getLogger("taskhero.status")


class StatusHandler:
    def __init__(self, state: BoardState, max_history: int = STATUS_HISTORY_LIMIT):
        self.state = state
        self.valid_statuses = LANE_STATUSES
        self.max_history = max_history

    @property
    def history(self) -> List[StatusChange]:
        return self.state.status_history

    def validate_dependencies(self, task: Task, new_status: str) -> ActionResult:
        if new_status != "done" or not task.dependencies:
            return ActionResult(True)
        blocking = get_blocked_by_dependencies(task.dependencies, build_status_index(self.state.all_tasks()))
        if blocking:
            return ActionResult.fail(
                "Cannot mark as done: dependencies not completed",
                task=task,
                incomplete_dependencies=blocking,
            )
        return ActionResult(True)

    def move_task_to_status(self, task: Task, new_status: str) -> ActionResult:
        if task is None:
            return ActionResult.fail("No task provided")
        if new_status not in self.valid_statuses:
            return ActionResult.fail(f"Invalid status: {new_status}", task=task)
        old_status = task.status
        if canonical_status(old_status) == new_status:
            return ActionResult.fail(f"Task is already {new_status}", task=task)
        gate = self.validate_dependencies(task, new_status)
        if not gate.success:
            return gate

        staged = StatusChange(task.id, old_status, new_status)
        task.status = new_status
        try:
            self.state.persist()
        except TaskStoreError as exc:
            task.status = old_status
            logger.warning("status change for task #%s rolled back: %s", task.id, exc)
            return ActionResult.fail(f"Failed to update task status: {exc}", task=task)
        push_capped(self.history, staged, self.max_history)
        self.state.reload_lanes()
        return ActionResult(
            True,
            message=f"Task #{task.id} moved from {old_status} to {new_status}",
            task=task,
            data={"old_status": old_status, "new_status": new_status},
        )

    def move_selected_task_to_status(self, new_status: str) -> ActionResult:
        task = self.state.layout.get_selected_task()
        if task is None:
            return ActionResult.fail("No task selected")
        return self.move_task_to_status(task, new_status)

    def batch_update_status(self, task_ids: Iterable[Any], new_status: str) -> ActionResult:
        task_ids = list(task_ids)
        if new_status not in self.valid_statuses:
            return ActionResult.fail(f"Invalid status: {new_status}")
        results: List[Dict[str, Any]] = []
        success_count = 0
        for task_id in task_ids:
            task = self.state.find_task(task_id)
            if task is None:
                results.append({"task_id": task_id, "success": False, "reason": f"Task #{task_id} not found"})
                continue
            outcome = self.move_task_to_status(task, new_status)
            results.append({"task_id": task_id, "success": outcome.success, "reason": outcome.reason})
            if outcome.success:
                success_count += 1
        error_count = len(task_ids) - success_count
        return ActionResult(
            error_count == 0,
            message=f"Updated {success_count} of {len(task_ids)} tasks",
            reason="" if error_count == 0 else f"{error_count} task(s) failed",
            data={
                "success_count": success_count,
                "error_count": error_count,
                "total_tasks": len(task_ids),
                "results": results,
            },
        )

    def undo_last_change(self) -> ActionResult:
        if not self.history:
            return ActionResult.fail("No status changes to undo")
        change = self.history.pop()
        task = self.state.find_task(change.task_id)
        if task is None:
            return ActionResult.fail(f"Task #{change.task_id} not found")
        mutated = task.status
        task.status = change.old_status
        try:
            self.state.persist()
        except TaskStoreError as exc:
            task.status = mutated
            self.history.append(change)
            logger.warning("undo for task #%s failed: %s", change.task_id, exc)
            return ActionResult.fail(f"Failed to undo status change: {exc}", task=task)
        self.state.reload_lanes()
        return ActionResult(
            True,
            message=f"Reverted task #{change.task_id} from {change.new_status} to {change.old_status}",
            task=task,
            data={"reverted_from": change.new_status, "reverted_to": change.old_status},
        )

    def get_dependent_tasks(self, task_id: Any) -> List[Task]:
        return get_dependent_tasks(task_id, self.state.all_tasks())

    def get_history(self) -> List[StatusChange]:
        return list(self.history)

    def get_recent_changes(self, limit: int = 5) -> List[StatusChange]:
        return list(reversed(self.history[-limit:])) if limit > 0 else []

    def clear_history(self) -> None:
        self.history.clear()

    def get_status_statistics(self) -> Dict[str, int]:
        tasks = self.state.all_tasks()
        stats = {status: 0 for status in self.valid_statuses}
        for task in tasks:
            status = canonical_status(task.status)
            if status in stats:
                stats[status] += 1
        stats["total"] = len(tasks)
        stats["completion_percentage"] = completion_percentage(stats["done"], len(tasks))
        return stats

    def get_valid_statuses(self) -> List[str]:
        return list(self.valid_statuses)


__all__ = ["StatusHandler"]
