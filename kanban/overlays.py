"""Ordered stack of open popups; the topmost is drawn last and receives popup keys."""

from typing import Iterator, List, Optional

from .popups import ScrollablePopup

# Stack order used when several kinds are open at once: help is always drawn over details.
KIND_ORDER = {"details": 0, "statistics": 1, "help": 2}


class OverlayStack:
    def __init__(self):
        self._stack: List[ScrollablePopup] = []
        self.cursor_visible = True

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[ScrollablePopup]:
        return iter(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)

    @property
    def top(self) -> Optional[ScrollablePopup]:
        return self._stack[-1] if self._stack else None

    def find(self, kind: str) -> Optional[ScrollablePopup]:
        for popup in self._stack:
            if popup.kind == kind:
                return popup
        return None

    def is_open(self, kind: str) -> bool:
        return self.find(kind) is not None

    def push(self, popup: ScrollablePopup) -> None:
        """Open ``popup``, replacing any open popup of the same kind."""
        self._stack = [p for p in self._stack if p.kind != popup.kind]
        self._stack.append(popup)
        self._stack.sort(key=lambda p: KIND_ORDER.get(p.kind, len(KIND_ORDER)))
        self.cursor_visible = False

    def close(self, kind: str) -> Optional[ScrollablePopup]:
        popup = self.find(kind)
        if popup is not None:
            self._stack.remove(popup)
            self._restore_cursor()
        return popup

    def pop(self) -> Optional[ScrollablePopup]:
        if not self._stack:
            return None
        popup = self._stack.pop()
        self._restore_cursor()
        return popup

    def clear(self) -> None:
        self._stack.clear()
        self._restore_cursor()

    def _restore_cursor(self) -> None:
        if not self._stack:
            self.cursor_visible = True


__all__ = ["OverlayStack", "KIND_ORDER"]
