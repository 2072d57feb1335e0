"""Keystroke capture for search, title edit and confirmation modals.

At most one modal is active; it owns a single pending buffer. Every exit path
(commit, cancel, callback error) returns the machine to idle before callbacks
observe the outcome.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

SEARCH = "search"
EDIT = "edit"
CONFIRM = "confirm"
MODAL_KINDS = (SEARCH, EDIT, CONFIRM)

ENTER_KEYS = ("enter", "c-m", "c-j", "\r", "\n")
BACKSPACE_KEYS = ("backspace", "c-h", "\x7f", "\x08")
CANCEL_KEYS = ("escape", "c-c", "\x1b", "\x03")


def is_printable(key: str) -> bool:
    return len(key) == 1 and key >= " " and key != "\x7f"


@dataclass
class ModalOutcome:
    kind: str
    committed: bool
    value: str = ""
    context: Dict[str, Any] = field(default_factory=dict)


class ModalInput:
    def __init__(self):
        self.kind: Optional[str] = None
        self.buffer = ""
        self.prompt = ""
        self.context: Dict[str, Any] = {}
        self._on_commit: Optional[Callable[[ModalOutcome], Any]] = None
        self._on_cancel: Optional[Callable[[ModalOutcome], Any]] = None
        self.last_result: Any = None

    @property
    def active(self) -> bool:
        return self.kind is not None

    def open(
        self,
        kind: str,
        prompt: str = "",
        initial: str = "",
        context: Optional[Dict[str, Any]] = None,
        on_commit: Optional[Callable[[ModalOutcome], Any]] = None,
        on_cancel: Optional[Callable[[ModalOutcome], Any]] = None,
    ) -> None:
        if kind not in MODAL_KINDS:
            raise ValueError(f"Unknown modal kind: {kind}")
        self.kind = kind
        self.prompt = prompt
        self.buffer = initial or ""
        self.context = dict(context or {})
        self._on_commit = on_commit
        self._on_cancel = on_cancel

    def reset(self) -> None:
        self.kind = None
        self.buffer = ""
        self.prompt = ""
        self.context = {}
        self._on_commit = None
        self._on_cancel = None

    def _finish(self, committed: bool) -> ModalOutcome:
        value = self.buffer.strip() if self.kind in (SEARCH, EDIT) else self.buffer
        outcome = ModalOutcome(self.kind, committed, value, self.context)
        callback = self._on_commit if committed else self._on_cancel
        self.reset()
        self.last_result = callback(outcome) if callback else None
        return outcome

    def commit(self) -> Optional[ModalOutcome]:
        if not self.active:
            return None
        return self._finish(True)

    def cancel(self) -> Optional[ModalOutcome]:
        if not self.active:
            return None
        return self._finish(False)

    def feed(self, key: str) -> Optional[ModalOutcome]:
        """Process one key; returns the outcome when the modal closes, else None."""
        if not self.active:
            return None
        if self.kind == CONFIRM:
            if key in ("y", "Y"):
                return self.commit()
            return self.cancel()
        if key in CANCEL_KEYS:
            return self.cancel()
        if key in ENTER_KEYS:
            return self.commit()
        if key in BACKSPACE_KEYS:
            self.buffer = self.buffer[:-1]
            return None
        if is_printable(key):
            self.buffer += key
        return None


__all__ = [
    "SEARCH",
    "EDIT",
    "CONFIRM",
    "ModalInput",
    "ModalOutcome",
    "is_printable",
]
