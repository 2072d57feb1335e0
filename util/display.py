"""ANSI-aware text measuring, trimming, padding and wrapping."""

import re
from typing import List

from wcwidth import wcwidth

ANSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
RESET = "\x1b[0m"


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text or "")


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def visual_length(text: str) -> int:
    """Return visible width of text, ignoring escape sequences and counting wide characters."""
    return sum(char_width(ch) for ch in strip_ansi(text))


def _take_visible(text: str, limit: int) -> str:
    """Longest prefix of visible width <= limit; escape sequences are copied whole."""
    acc: List[str] = []
    used = 0
    pos = 0
    saw_escape = False
    while pos < len(text):
        match = ANSI_RE.match(text, pos)
        if match:
            acc.append(match.group(0))
            saw_escape = True
            pos = match.end()
            continue
        ch = text[pos]
        w = char_width(ch)
        if used + w > limit:
            break
        acc.append(ch)
        used += w
        pos += 1
    # Close any styling opened inside the kept prefix.
    if saw_escape and not "".join(acc).endswith(RESET):
        acc.append(RESET)
    return "".join(acc)


def truncate(text: str, width: int, ellipsis: str = "...") -> str:
    """Fit text into ``width`` visible cells, appending ``ellipsis`` when cut."""
    text = text or ""
    if visual_length(text) <= width:
        return text
    keep = width - visual_length(ellipsis)
    if keep <= 0:
        return ellipsis[: max(0, width)]
    return _take_visible(text, keep) + ellipsis


def trim(text: str, width: int) -> str:
    """Cut text to ``width`` visible cells without an ellipsis."""
    if visual_length(text) <= width:
        return text
    return _take_visible(text, max(0, width))


def pad_right(text: str, width: int) -> str:
    length = visual_length(text)
    if length >= width:
        return text
    return text + " " * (width - length)


def fit(text: str, width: int) -> str:
    """Trim and pad to exactly ``width`` visible cells."""
    return pad_right(trim(text, width), width)


def center(text: str, width: int) -> str:
    length = visual_length(text)
    if length >= width:
        return text
    pad = width - length
    left = pad // 2
    return " " * left + text + " " * (pad - left)


def skip_visible(text: str, count: int) -> str:
    """Drop the first ``count`` visible cells; escapes inside the dropped part are discarded."""
    pos = 0
    used = 0
    while pos < len(text) and used < count:
        match = ANSI_RE.match(text, pos)
        if match:
            pos = match.end()
            continue
        used += char_width(text[pos])
        pos += 1
    # A wide character straddling the cut leaves one blank cell.
    return " " * (used - count) + text[pos:]


def overlay(base: str, text: str, x: int) -> str:
    """Draw ``text`` over ``base`` starting at visible column ``x``."""
    left = pad_right(trim(base, x), x)
    right = skip_visible(base, x + visual_length(text))
    if right:
        return left + RESET + text + RESET + right
    return left + RESET + text + RESET


def wrap_words(text: str, width: int, max_lines: int = 0) -> List[str]:
    """Word-wrap plain text; words longer than ``width`` are truncated."""
    if not text or width <= 0:
        return []
    lines: List[str] = []
    for paragraph in str(text).splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if visual_length(candidate) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            if visual_length(word) > width:
                lines.append(truncate(word, width))
                current = ""
            else:
                current = word
        if current or not paragraph.strip():
            lines.append(current)
    while lines and not lines[-1]:
        lines.pop()
    if max_lines and len(lines) > max_lines:
        lines = lines[:max_lines]
    return lines


__all__ = [
    "ANSI_RE",
    "RESET",
    "strip_ansi",
    "char_width",
    "visual_length",
    "truncate",
    "trim",
    "pad_right",
    "fit",
    "center",
    "wrap_words",
    "skip_visible",
    "overlay",
]
