import argparse
import json
import logging
from pathlib import Path

import pytest

import config
from kanban import cli
from kanban.themes import DEFAULT_THEME, THEMES, get_theme_palette, paint, paint_over, set_active_theme


@pytest.fixture
def user_config(tmp_path, monkeypatch):
    path = tmp_path / "board.yaml"
    monkeypatch.setattr(config, "USER_CONFIG_PATH", path)
    return path


@pytest.fixture
def restore_theme():
    yield
    set_active_theme(DEFAULT_THEME)


@pytest.fixture
def restore_logging():
    logger = logging.getLogger("taskhero")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers[len(handlers):]:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


def test_theme_round_trip(user_config):
    assert config.get_user_theme() == ""
    config.set_user_theme("mono")
    assert config.get_user_theme() == "mono"
    assert "theme: mono" in user_config.read_text(encoding="utf-8")
    config.set_user_theme("")
    assert not user_config.exists()


def test_tasks_path_default_and_override(user_config):
    assert config.get_tasks_path() == Path("tasks") / "tasks.json"
    config.set_tasks_path("/data/tasks.json")
    assert config.get_tasks_path() == Path("/data/tasks.json")


def test_ttimeoutlen_parsing(user_config):
    assert config.get_ttimeoutlen() == config.DEFAULT_TTIMEOUTLEN
    user_config.write_text("ttimeoutlen: 0.2\n", encoding="utf-8")
    assert config.get_ttimeoutlen() == 0.2
    user_config.write_text("ttimeoutlen: soon\n", encoding="utf-8")
    assert config.get_ttimeoutlen() == config.DEFAULT_TTIMEOUTLEN


def test_corrupt_config_is_ignored(user_config, caplog):
    user_config.write_text("theme: [unclosed\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="taskhero.config"):
        assert config.get_user_theme() == ""
    assert "unreadable config" in caplog.text


def test_theme_palettes(restore_theme):
    assert get_theme_palette("missing") == THEMES[DEFAULT_THEME]
    assert paint("status.done", "ok") == "\x1b[32;1mok\x1b[0m"
    assert paint("no.such.style", "ok") == "ok"
    assert paint("status.done", "") == ""
    assert paint_over("statusbar", "a\x1b[0mb") == "\x1b[44;37ma\x1b[0m\x1b[44;37mb\x1b[0m"
    set_active_theme("mono")
    assert paint("status.done", "ok") == "ok"


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.tasks_path is None
    assert args.theme is None
    assert args.log_level == "WARNING"
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--theme", "neon"])


def test_parse_size():
    assert cli.parse_size("120x30") == (120, 30)
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_size("wide")


def test_snapshot_prints_one_frame(tmp_path, user_config, capsys, restore_theme, restore_logging):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"tasks": [{"id": 1, "title": "Hello board", "status": "pending"}]}), encoding="utf-8")

    assert cli.main([str(path), "--snapshot", "100x20", "--theme", "mono", "--save-theme"]) == 0

    out = capsys.readouterr().out
    assert "#1 Hello board" in out
    assert "PENDING (1)" in out
    assert config.get_user_theme() == "mono"


def test_log_file_handler(tmp_path, user_config, capsys, restore_theme, restore_logging):
    log_file = tmp_path / "board.log"
    cli.main([str(tmp_path / "missing.json"), "--snapshot", "80x24", "--log-file", str(log_file)])
    capsys.readouterr()
    for handler in logging.getLogger("taskhero").handlers:
        handler.flush()
    assert "could not load tasks" in log_file.read_text(encoding="utf-8")
