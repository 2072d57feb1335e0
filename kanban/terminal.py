"""Box-drawing glyphs, border line builders and raw terminal control sequences."""

from typing import Dict

from util.display import visual_length

BOX_CHARS: Dict[str, str] = {
    "top_left": "┌",
    "top_right": "┐",
    "bottom_left": "└",
    "bottom_right": "┘",
    "horizontal": "─",
    "vertical": "│",
    "double_top_left": "╔",
    "double_top_right": "╗",
    "double_bottom_left": "╚",
    "double_bottom_right": "╝",
    "double_horizontal": "═",
    "double_vertical": "║",
    "rounded_top_left": "╭",
    "rounded_top_right": "╮",
    "rounded_bottom_left": "╰",
    "rounded_bottom_right": "╯",
    "left_tee": "├",
    "right_tee": "┤",
    "double_left_tee": "╠",
    "double_right_tee": "╣",
}


def move_cursor(row: int, col: int) -> str:
    """Cursor positioning sequence (1-based row/col)."""
    return f"\x1b[{row};{col}H"


CLEAR_SCREEN = "\x1b[2J" + move_cursor(1, 1)
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def horizontal_line(
    width: int,
    left: str = BOX_CHARS["top_left"],
    right: str = BOX_CHARS["top_right"],
    fill: str = BOX_CHARS["horizontal"],
) -> str:
    if width < 2:
        return ""
    return left + fill * (width - 2) + right


def rounded_line(width: int, top: bool = True) -> str:
    if top:
        return horizontal_line(width, BOX_CHARS["rounded_top_left"], BOX_CHARS["rounded_top_right"])
    return horizontal_line(width, BOX_CHARS["rounded_bottom_left"], BOX_CHARS["rounded_bottom_right"])


def double_line(width: int, top: bool = True) -> str:
    fill = BOX_CHARS["double_horizontal"]
    if top:
        return horizontal_line(width, BOX_CHARS["double_top_left"], BOX_CHARS["double_top_right"], fill)
    return horizontal_line(width, BOX_CHARS["double_bottom_left"], BOX_CHARS["double_bottom_right"], fill)


def separator_line(width: int, double: bool = False) -> str:
    if double:
        return horizontal_line(
            width, BOX_CHARS["double_left_tee"], BOX_CHARS["double_right_tee"], BOX_CHARS["double_horizontal"]
        )
    return horizontal_line(width, BOX_CHARS["left_tee"], BOX_CHARS["right_tee"])


def vertical_line(content: str, width: int, border: str = BOX_CHARS["vertical"]) -> str:
    """Wrap pre-truncated content in vertical borders, centring it in the interior."""
    if width < 2:
        return ""
    padding = max(0, width - visual_length(content) - 2)
    left = padding // 2
    return border + " " * left + content + " " * (padding - left) + border


def double_vertical_line(content: str, width: int) -> str:
    return vertical_line(content, width, BOX_CHARS["double_vertical"])


def left_vertical_line(content: str, width: int, border: str = BOX_CHARS["vertical"]) -> str:
    """Like ``vertical_line`` but left-aligned, for body text in popups."""
    if width < 2:
        return ""
    padding = max(0, width - visual_length(content) - 2)
    return border + content + " " * padding + border


__all__ = [
    "BOX_CHARS",
    "CLEAR_SCREEN",
    "HIDE_CURSOR",
    "SHOW_CURSOR",
    "move_cursor",
    "horizontal_line",
    "rounded_line",
    "double_line",
    "separator_line",
    "vertical_line",
    "double_vertical_line",
    "left_vertical_line",
]
