from dataclasses import dataclass

MIN_COLUMN_WIDTH = 20
COLUMN_GUTTER = 2
LANE_COUNT = 3
# Rows reserved around the lanes: title gap, status bar, spare rows.
RESERVED_ROWS = 4

POPUP_RATIO = 0.75
POPUP_MIN_WIDTH = 60
POPUP_MIN_HEIGHT = 20
POPUP_MARGIN = 4

# Lanes narrower than this render one-line compact cards.
COMPACT_CARD_WIDTH = 30
# Lanes narrower than this use compact metadata badges.
COMPACT_METADATA_WIDTH = 40
# Terminals narrower than this get the minimal status bar.
MINIMAL_STATUS_WIDTH = 60


@dataclass(frozen=True)
class ColumnGeometry:
    """Lane sizing derived from the terminal size."""

    column_width: int
    column_height: int
    total_padding: int
    available_width: int


def column_widths(terminal_width: int, num_columns: int = LANE_COUNT, gutter: int = COLUMN_GUTTER) -> int:
    """Width of a single lane: ``floor((tw - gutter*(n-1) - 2) / n)``, floored at 20."""
    total_padding = gutter * (num_columns - 1)
    available = terminal_width - total_padding - 2
    return max(available // max(1, num_columns), MIN_COLUMN_WIDTH)


def board_geometry(terminal_width: int, terminal_height: int) -> ColumnGeometry:
    total_padding = COLUMN_GUTTER * (LANE_COUNT - 1)
    return ColumnGeometry(
        column_width=column_widths(terminal_width),
        column_height=max(0, terminal_height - RESERVED_ROWS),
        total_padding=total_padding,
        available_width=terminal_width - total_padding - 2,
    )


@dataclass(frozen=True)
class PopupGeometry:
    width: int
    height: int
    x: int
    y: int


def popup_geometry(terminal_width: int, terminal_height: int) -> PopupGeometry:
    """75% of the viewport, clamped to a minimum and to the terminal, centred."""
    width = max(int(terminal_width * POPUP_RATIO), POPUP_MIN_WIDTH)
    height = max(int(terminal_height * POPUP_RATIO), POPUP_MIN_HEIGHT)
    width = max(2, min(width, terminal_width - POPUP_MARGIN))
    height = max(5, min(height, terminal_height - POPUP_MARGIN))
    x = max(0, (terminal_width - width) // 2)
    y = max(0, (terminal_height - height) // 2)
    return PopupGeometry(width=width, height=height, x=x, y=y)


__all__ = [
    "MIN_COLUMN_WIDTH",
    "COLUMN_GUTTER",
    "LANE_COUNT",
    "RESERVED_ROWS",
    "COMPACT_CARD_WIDTH",
    "COMPACT_METADATA_WIDTH",
    "MINIMAL_STATUS_WIDTH",
    "ColumnGeometry",
    "PopupGeometry",
    "column_widths",
    "board_geometry",
    "popup_geometry",
]
