from enum import Enum
from typing import Final, Tuple


class Status(Enum):
    PENDING = ("pending", "yellow", "📋", "PENDING")
    IN_PROGRESS = ("in-progress", "blue", "🔄", "IN PROGRESS")
    DONE = ("done", "green", "✅", "DONE")
    BLOCKED = ("blocked", "red", "🚫", "BLOCKED")
    DEFERRED = ("deferred", "gray", "⏸", "DEFERRED")
    CANCELLED = ("cancelled", "red", "❌", "CANCELLED")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]

    @property
    def glyph(self) -> str:
        return self.value[2]

    @property
    def label(self) -> str:
        return self.value[3]

    @classmethod
    def from_string(cls, value: str) -> "Status":
        """Resolve a status token; anything unknown lands on PENDING."""
        val = normalize_task_status(value, allow_unknown=True)
        for status in cls:
            if status.code == val:
                return status
        return cls.PENDING


LANE_STATUSES: Final[Tuple[str, ...]] = ("pending", "in-progress", "done")
SIDE_STATUSES: Final[Tuple[str, ...]] = ("blocked", "deferred", "cancelled")
ALL_STATUSES: Final[Tuple[str, ...]] = LANE_STATUSES + SIDE_STATUSES

PRIORITIES: Final[Tuple[str, ...]] = ("low", "medium", "high", "critical")

_ALIASES: Final[dict] = {
    "in_progress": "in-progress",
    "inprogress": "in-progress",
    "todo": "pending",
    "completed": "done",
    "canceled": "cancelled",
}


def normalize_task_status(value: str, *, allow_unknown: bool = False) -> str:
    """Normalize task status input to the canonical lowercase token.

    Canonical statuses: pending, in-progress, done, blocked, deferred, cancelled.

    When allow_unknown=True, returns the normalized token (lowercased, spaces→dashes)
    even if it is not a known status.
    """
    token = (value or "").strip().lower().replace(" ", "-")
    if not token:
        return token
    token = _ALIASES.get(token, token)
    if token in ALL_STATUSES:
        return token
    if allow_unknown:
        return token
    raise ValueError(f"Invalid task status: {value!r}")


def lane_for_status(status: str) -> str:
    """Lane a task renders in; side and unknown statuses fold into pending."""
    token = normalize_task_status(status, allow_unknown=True)
    return token if token in LANE_STATUSES else "pending"


def canonical_status(value: str) -> str:
    """Token used wherever statuses are compared; blank reads as pending."""
    return normalize_task_status(value, allow_unknown=True) or "pending"
