"""Board colour themes as ANSI SGR palettes."""

from typing import Dict

THEMES: Dict[str, Dict[str, str]] = {
    "default": {
        "text": "37",
        "text.dim": "2",
        "text.muted": "90",
        "header": "1",
        "border": "",
        "id": "36;1",
        "title": "37",
        "selected": "44;37",
        "status.pending": "33;1",
        "status.in-progress": "34;1",
        "status.done": "32;1",
        "status.blocked": "31;1",
        "status.deferred": "90;1",
        "status.cancelled": "31;1",
        "priority.critical": "35;1",
        "priority.high": "31",
        "priority.medium": "33",
        "priority.low": "32",
        "priority.none": "90",
        "badge.deps.low": "90",
        "badge.deps.mid": "33",
        "badge.deps.high": "31",
        "badge.subtasks": "35",
        "badge.prd": "34",
        "progress.filled": "32",
        "progress.empty": "90",
        "statusbar": "44;37",
        "message.success": "32",
        "message.error": "31",
        "message.warning": "33",
        "message.info": "34",
        "mode.filter": "33",
        "mode.search": "36",
        "mode.edit": "35",
        "mode.help": "32",
        "popup.title": "34;1",
        "popup.section": "37;1",
        "popup.value": "36",
    },
    "high-contrast": {
        "text": "97",
        "text.dim": "37",
        "text.muted": "37",
        "header": "97;1",
        "border": "97",
        "id": "96;1",
        "title": "97",
        "selected": "107;30",
        "status.pending": "93;1",
        "status.in-progress": "94;1",
        "status.done": "92;1",
        "status.blocked": "91;1",
        "status.deferred": "37;1",
        "status.cancelled": "91;1",
        "priority.critical": "95;1",
        "priority.high": "91;1",
        "priority.medium": "93",
        "priority.low": "92",
        "priority.none": "37",
        "badge.deps.low": "37",
        "badge.deps.mid": "93",
        "badge.deps.high": "91",
        "badge.subtasks": "95",
        "badge.prd": "94",
        "progress.filled": "92",
        "progress.empty": "37",
        "statusbar": "107;30",
        "message.success": "32;1",
        "message.error": "31;1",
        "message.warning": "33;1",
        "message.info": "34;1",
        "mode.filter": "33;1",
        "mode.search": "36;1",
        "mode.edit": "35;1",
        "mode.help": "32;1",
        "popup.title": "94;1",
        "popup.section": "97;1",
        "popup.value": "96",
    },
    "mono": {},
}

DEFAULT_THEME = "default"

_active: Dict[str, str] = dict(THEMES[DEFAULT_THEME])


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if base is None:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def set_active_theme(theme: str) -> None:
    global _active
    _active = get_theme_palette(theme)


def paint(style: str, text: str) -> str:
    """Wrap text in the SGR codes of ``style``; unknown styles and empty text pass through."""
    code = _active.get(style, "")
    if not code or not text:
        return text
    return f"\x1b[{code}m{text}\x1b[0m"


def paint_over(style: str, text: str) -> str:
    """Like ``paint`` but re-applies ``style`` after every reset inside ``text``."""
    code = _active.get(style, "")
    if not code or not text:
        return text
    opener = f"\x1b[{code}m"
    return opener + text.replace("\x1b[0m", "\x1b[0m" + opener) + "\x1b[0m"


__all__ = ["THEMES", "DEFAULT_THEME", "get_theme_palette", "set_active_theme", "paint", "paint_over"]
