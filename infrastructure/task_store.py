"""tasks.json read/write.

The board reads the whole document on launch/refresh and rewrites the ``tasks``
array on every accepted change. Other top-level fields round-trip unchanged.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core import Task

logger = logging.getLogger("taskhero.store")

# One rewrite at a time.
_WRITE_LOCK = threading.Lock()


class TaskStoreError(Exception):
    """Raised when the task document cannot be read or written."""


@dataclass
class TaskDocument:
    tasks: List[Task] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def updated_at(self) -> Optional[str]:
        meta = self.data.get("meta")
        return meta.get("updatedAt") if isinstance(meta, dict) else None

    def touch(self, now: Optional[datetime] = None) -> str:
        stamp = (now or datetime.now(timezone.utc)).isoformat()
        meta = self.data.get("meta")
        if not isinstance(meta, dict):
            meta = {}
            self.data["meta"] = meta
        meta["updatedAt"] = stamp
        return stamp

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.data)
        payload["tasks"] = [task.to_dict() for task in self.tasks]
        return payload

    def find(self, task_id: Any) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def read_tasks(path: Path) -> TaskDocument:
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TaskStoreError(f"Tasks file not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise TaskStoreError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise TaskStoreError(f"Unexpected document shape in {path}: expected an object")
    items = raw.get("tasks") or []
    if not isinstance(items, list):
        raise TaskStoreError(f"Unexpected 'tasks' value in {path}: expected a list")
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise TaskStoreError(f"Unexpected task entry at index {position} in {path}: expected an object")
    tasks = [Task.from_dict(item) for item in items]
    logger.debug("loaded %d tasks from %s", len(tasks), path)
    return TaskDocument(tasks=tasks, data=raw)


def write_tasks(path: Path, document: TaskDocument) -> None:
    """Atomically rewrite the document (temp file + rename)."""
    path = Path(path)
    text = json.dumps(document.to_dict(), ensure_ascii=False, indent=2) + "\n"
    with _WRITE_LOCK:
        tmp_path: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                delete=False,
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
            ) as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = Path(tmp.name)
            os.replace(str(tmp_path), str(path))
        except OSError as exc:
            logger.warning("Failed to save tasks to %s: %s", path, exc)
            raise TaskStoreError(f"Failed to save tasks: {exc}") from exc
        finally:
            if tmp_path and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass


__all__ = ["TaskDocument", "TaskStoreError", "read_tasks", "write_tasks"]
