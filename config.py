from __future__ import annotations

import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

USER_CONFIG_PATH = Path.home() / ".taskhero_board.yaml"
DEFAULT_TASKS_PATH = Path("tasks") / "tasks.json"
DEFAULT_TTIMEOUTLEN = 0.05

logger = logging.getLogger("taskhero.config")


def _load_config() -> Dict[str, Any]:
    if not USER_CONFIG_PATH.exists():
        return {}
    try:
        data = yaml.safe_load(USER_CONFIG_PATH.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", USER_CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    if not data:
        if USER_CONFIG_PATH.exists():
            USER_CONFIG_PATH.unlink()
        return
    USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    USER_CONFIG_PATH.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _set_value(key: str, value: Optional[str]) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data[key] = value
    else:
        data.pop(key, None)
    _save_config(data)


def get_user_theme() -> str:
    return str(_load_config().get("theme", "") or "").strip()


def set_user_theme(value: str) -> None:
    _set_value("theme", value)


def get_tasks_path() -> Path:
    value = str(_load_config().get("tasks_path", "") or "").strip()
    return Path(value).expanduser() if value else DEFAULT_TASKS_PATH


def set_tasks_path(value: str) -> None:
    _set_value("tasks_path", value)


def get_ttimeoutlen() -> float:
    raw = _load_config().get("ttimeoutlen", DEFAULT_TTIMEOUTLEN)
    try:
        return max(0.0, float(raw))
    except (TypeError, ValueError):
        return DEFAULT_TTIMEOUTLEN
