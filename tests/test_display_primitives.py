from util.display import (
    RESET,
    center,
    fit,
    overlay,
    skip_visible,
    strip_ansi,
    trim,
    truncate,
    visual_length,
    wrap_words,
)
from util.responsive import board_geometry, column_widths, popup_geometry
from kanban.terminal import double_line, rounded_line, separator_line, vertical_line


def test_visual_length_ignores_escapes_and_counts_wide_chars():
    assert visual_length("\x1b[31mab\x1b[0m") == 2
    assert visual_length("表") == 2
    assert visual_length("") == 0


def test_truncate_identity_when_it_fits():
    assert truncate("hello", 5) == "hello"


def test_truncate_appends_ellipsis():
    out = truncate("hello world", 8)
    assert out == "hello..."
    assert visual_length(out) == 8


def test_truncate_keeps_escape_sequences_whole():
    out = truncate("\x1b[31mhello world\x1b[0m", 8)
    assert strip_ansi(out) == "hello..."
    assert out.startswith("\x1b[31m")
    assert RESET in out


def test_truncate_clamps_to_empty_never_negative():
    assert truncate("abc", 2) == ".."
    assert truncate("abc", 0) == ""
    assert truncate("abc", -3) == ""


def test_trim_and_fit():
    assert trim("abcdef", 3) == "abc"
    assert fit("ab", 4) == "ab  "
    assert fit("abcdef", 4) == "abcd"


def test_center_pads_left_floor_half():
    assert center("ab", 7) == "  ab   "
    assert visual_length(center("\x1b[1mab\x1b[0m", 6)) == 6
    assert center("abcdef", 3) == "abcdef"


def test_wrap_words_respects_width_and_max_lines():
    assert wrap_words("one two three four", 9) == ["one two", "three", "four"]
    assert wrap_words("one two three four", 9, max_lines=2) == ["one two", "three"]
    assert wrap_words("", 10) == []


def test_overlay_replaces_cells():
    out = overlay("abcdefghij", "XY", 3)
    assert strip_ansi(out) == "abcXYfghij"
    assert skip_visible("ab表cd", 3) == " cd"


def test_column_widths_formula_and_minimum():
    assert column_widths(120) == 38
    assert column_widths(80) == 24
    assert column_widths(40) == 20


def test_board_geometry_reserves_rows():
    geometry = board_geometry(120, 30)
    assert geometry.column_height == 26
    assert geometry.column_width == 38


def test_popup_geometry_clamps_and_centres():
    geo = popup_geometry(120, 40)
    assert (geo.width, geo.height, geo.x, geo.y) == (90, 30, 15, 5)
    small = popup_geometry(80, 24)
    assert (small.width, small.height) == (60, 20)
    tiny = popup_geometry(50, 15)
    assert tiny.width <= 46 and tiny.height <= 11


def test_border_builders():
    assert vertical_line("ab", 6) == "│ ab │"
    assert vertical_line("ab", 1) == ""
    assert rounded_line(4) == "╭──╮"
    assert rounded_line(4, top=False) == "╰──╯"
    assert double_line(3) == "╔═╗"
    assert separator_line(3, double=True) == "╠═╣"
