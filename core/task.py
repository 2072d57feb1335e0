"""Task model as stored in tasks.json.

Known fields are exposed as attributes. The source mapping is kept in ``raw`` so
a read/write cycle reproduces the document: keys keep their order, unknown keys
survive, and defaults are only written for keys that were present already.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


def _merge(raw: Dict[str, Any], values: Iterable[Tuple[str, Any, Any]]) -> Dict[str, Any]:
    data = dict(raw)
    for key, value, default in values:
        if key in data:
            if value == default and data[key] is None:
                continue
            data[key] = value
        elif value != default:
            data[key] = value
    return data


@dataclass
class PrdSource:
    """Provenance of a task generated from a PRD document."""

    file_path: str = ""
    file_name: str = ""
    file_hash: str = ""
    file_size: Optional[int] = None
    parsed_date: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["PrdSource"]:
        if not data:
            return None
        return cls(
            file_path=str(data.get("filePath") or ""),
            file_name=str(data.get("fileName") or ""),
            file_hash=str(data.get("fileHash") or ""),
            file_size=data.get("fileSize"),
            parsed_date=str(data.get("parsedDate") or ""),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _merge(
            self.raw,
            [
                ("filePath", self.file_path, ""),
                ("fileName", self.file_name, ""),
                ("fileHash", self.file_hash, ""),
                ("fileSize", self.file_size, None),
                ("parsedDate", self.parsed_date, ""),
            ],
        )


@dataclass
class Subtask:
    id: Any
    title: str = ""
    status: str = "pending"
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subtask":
        payload = dict(data or {})
        return cls(
            id=payload.get("id"),
            title=str(payload.get("title") or ""),
            status=str(payload.get("status") or "pending"),
            raw=payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        return _merge(
            self.raw,
            [("id", self.id, None), ("title", self.title, ""), ("status", self.status, "pending")],
        )

    @property
    def is_done(self) -> bool:
        return self.status == "done"


@dataclass
class Task:
    id: int
    title: str = ""
    description: str = ""
    details: str = ""
    test_strategy: str = ""
    status: str = "pending"
    priority: str = "medium"
    dependencies: List[Any] = field(default_factory=list)
    subtasks: List[Subtask] = field(default_factory=list)
    prd_source: Optional[PrdSource] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        payload = dict(data or {})
        return cls(
            id=payload.get("id", 0),
            title=str(payload.get("title") or ""),
            description=str(payload.get("description") or ""),
            details=str(payload.get("details") or ""),
            test_strategy=str(payload.get("testStrategy") or ""),
            status=str(payload.get("status") or "pending"),
            priority=str(payload.get("priority") or "medium"),
            dependencies=list(payload.get("dependencies") or []),
            subtasks=[Subtask.from_dict(st) for st in payload.get("subtasks") or []],
            prd_source=PrdSource.from_dict(payload.get("prdSource")),
            raw=payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _merge(
            self.raw,
            [
                ("id", self.id, None),
                ("title", self.title, ""),
                ("description", self.description, ""),
                ("details", self.details, ""),
                ("testStrategy", self.test_strategy, ""),
                ("status", self.status, "pending"),
                ("priority", self.priority, "medium"),
                ("dependencies", list(self.dependencies), []),
            ],
        )
        if "subtasks" in data or self.subtasks:
            data["subtasks"] = [st.to_dict() for st in self.subtasks]
        if "prdSource" in data or self.prd_source is not None:
            data["prdSource"] = self.prd_source.to_dict() if self.prd_source else None
        return data

    @property
    def has_subtasks(self) -> bool:
        return bool(self.subtasks)

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies)

    @property
    def subtasks_done(self) -> int:
        return sum(1 for st in self.subtasks if st.is_done)


__all__ = ["Task", "Subtask", "PrdSource"]
