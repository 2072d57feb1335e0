"""Terminal Kanban board over a TaskHero tasks.json."""

from .board_layout import BoardLayout, BoardStatistics
from .board_state import ActionResult, BoardState
from .column import KanbanColumn

__all__ = [
    "ActionResult",
    "BoardLayout",
    "BoardState",
    "BoardStatistics",
    "KanbanColumn",
]
