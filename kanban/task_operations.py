"""Single-task actions: view, info, delete, title edit, refresh."""

import logging
from typing import Any, List, Optional

from core import Task, build_status_index
from infrastructure.task_store import TaskStoreError, read_tasks

from .board_state import OPERATION_LOG_LIMIT, ActionResult, BoardState, OperationRecord
from .modal_input import CONFIRM, EDIT, ModalInput, ModalOutcome
from .overlays import OverlayStack
from .popups import TaskDetailsPopup

logger = logging.getLogger("taskhero.board")


class TaskOperationsHandler:
    def __init__(self, state: BoardState, overlays: Optional[OverlayStack] = None, modal: Optional[ModalInput] = None):
        self.state = state
        self.overlays = overlays if overlays is not None else OverlayStack()
        self.modal = modal if modal is not None else ModalInput()
        self.max_history = OPERATION_LOG_LIMIT

    def add_to_history(self, operation: str, task_id: Any, **details) -> None:
        self.state.record_operation(operation, task_id, **details)

    def get_history(self) -> List[OperationRecord]:
        return list(self.state.operation_log)

    def get_recent_operations(self, limit: int = 5) -> List[OperationRecord]:
        return list(reversed(self.state.operation_log[-limit:])) if limit > 0 else []

    def clear_history(self) -> None:
        self.state.operation_log.clear()

    # ------------------------------------------------------------------ read-only

    def view_task_details(self, task: Optional[Task]) -> ActionResult:
        if task is None:
            return ActionResult.fail("No task provided")
        self.overlays.push(TaskDetailsPopup(task, build_status_index(self.state.all_tasks())))
        self.state.focus_mode = "details"
        self.add_to_history("view", task.id)
        return ActionResult(True, task=task, message=f"Viewing task #{task.id}")

    def show_task_info(self, task: Optional[Task]) -> ActionResult:
        if task is None:
            return ActionResult.fail("No task provided")
        info = [f"ID: #{task.id}", f"Status: {task.status}", f"Priority: {task.priority or 'none'}"]
        if task.dependencies:
            info.append(f"Deps: {len(task.dependencies)}")
        if task.subtasks:
            info.append(f"Subtasks: {len(task.subtasks)}")
        if task.prd_source is not None:
            info.append(f"PRD: {task.prd_source.file_name or 'Yes'}")
        text = " | ".join(info)
        self.add_to_history("info", task.id)
        return ActionResult(True, task=task, message=f"📋 {text}", data={"info": text})

    # ------------------------------------------------------------------ delete

    def delete_task(self, task: Optional[Task]) -> ActionResult:
        """Ask for confirmation; the delete happens only when the modal is answered with ``y``."""
        if task is None:
            return ActionResult.fail("No task provided")
        self.modal.open(
            CONFIRM,
            prompt=f"Delete task #{task.id}? This cannot be undone (y/N)",
            context={"task_id": task.id},
            on_commit=self._confirmed_delete,
            on_cancel=lambda outcome: ActionResult(True, message="Delete cancelled"),
        )
        return ActionResult(False, reason="Delete confirmation required", task=task, requires_confirmation=True)

    def _confirmed_delete(self, outcome: ModalOutcome) -> ActionResult:
        return self.confirm_delete(outcome.context.get("task_id"))

    def confirm_delete(self, task_id: Any) -> ActionResult:
        task = self.state.find_task(task_id)
        if task is None:
            return ActionResult.fail(f"Task #{task_id} not found")
        state = self.state
        saved_view = list(state.tasks)
        saved_original = list(state.original_tasks) if state.original_tasks is not None else None
        saved_document = list(state.document.tasks)
        saved_deps = {other.id: list(other.dependencies) for other in state.all_tasks()}

        state.remove_task(task_id)
        for other in state.all_tasks():
            if task_id in other.dependencies:
                other.dependencies = [dep for dep in other.dependencies if dep != task_id]
        try:
            state.persist()
        except TaskStoreError as exc:
            state.tasks = saved_view
            state.original_tasks = saved_original
            state.document.tasks = saved_document
            for other in state.all_tasks():
                other.dependencies = saved_deps.get(other.id, other.dependencies)
            logger.warning("delete of task #%s rolled back: %s", task_id, exc)
            return ActionResult.fail(f"Failed to delete task: {exc}", task=task)
        state.reload_lanes()
        self.add_to_history("delete", task_id, title=task.title)
        return ActionResult(True, task=task, message=f"Task #{task_id} deleted")

    # ------------------------------------------------------------------ edit

    def edit_task_title(self, task: Optional[Task]) -> ActionResult:
        """Open the title editor; Enter commits the buffer."""
        if task is None:
            return ActionResult.fail("No task provided")
        self.modal.open(
            EDIT,
            prompt=f"Edit task #{task.id} title",
            initial=task.title,
            context={"task_id": task.id},
            on_commit=self._committed_title,
            on_cancel=lambda outcome: ActionResult(True, message="Edit cancelled"),
        )
        return ActionResult(False, reason="Title input required", task=task, requires_input=True)

    def _committed_title(self, outcome: ModalOutcome) -> ActionResult:
        return self.commit_title(outcome.context.get("task_id"), outcome.value)

    def commit_title(self, task_id: Any, new_title: str) -> ActionResult:
        task = self.state.find_task(task_id)
        if task is None:
            return ActionResult.fail(f"Task #{task_id} not found")
        new_title = (new_title or "").strip()
        if not new_title:
            return ActionResult.fail("Title cannot be empty", task=task)
        if new_title == task.title:
            return ActionResult.fail("Title unchanged", task=task)
        old_title = task.title
        task.title = new_title
        try:
            self.state.persist()
        except TaskStoreError as exc:
            task.title = old_title
            logger.warning("title edit for task #%s rolled back: %s", task_id, exc)
            return ActionResult.fail(f"Failed to update title: {exc}", task=task)
        self.state.reload_lanes()
        self.add_to_history("edit", task_id, old_title=old_title, new_title=new_title)
        return ActionResult(True, task=task, message=f"Task #{task_id} renamed")

    # ------------------------------------------------------------------ refresh

    def refresh_board(self) -> ActionResult:
        if self.state.tasks_path is None:
            return ActionResult.fail("No tasks file loaded")
        try:
            document = read_tasks(self.state.tasks_path)
        except TaskStoreError as exc:
            logger.warning("refresh failed: %s", exc)
            return ActionResult.fail(str(exc))
        self.state.load_document(document)
        self.add_to_history("refresh", None, count=len(document.tasks))
        return ActionResult(True, message=f"Board refreshed ({len(document.tasks)} tasks)")


__all__ = ["TaskOperationsHandler"]
