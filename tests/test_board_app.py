import json

from prompt_toolkit.application import Application, create_app_session
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from infrastructure.task_store import read_tasks
from kanban.board_app import KanbanBoard, build_application
from util.display import strip_ansi, visual_length


def make_board(tmp_path, width=120, height=30):
    path = tmp_path / "tasks.json"
    payload = {
        "tasks": [
            {"id": 1, "title": "Set up repo", "status": "done", "priority": "high"},
            {"id": 2, "title": "Auth service", "status": "pending", "priority": "high"},
            {"id": 3, "title": "Board view", "status": "pending", "dependencies": [2]},
            {"id": 4, "title": "Docs", "status": "in-progress", "priority": "low"},
            {"id": 5, "title": "Parked", "status": "deferred"},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    board = KanbanBoard(path, width=width, height=height)
    assert board.load()
    return path, board


def message(board):
    return strip_ansi(board.status_bar.current_message())


def test_load_missing_file_shows_empty_board(tmp_path):
    board = KanbanBoard(tmp_path / "nope.json")
    assert board.load() is False
    assert board.state.tasks == []
    assert "not found" in message(board)
    assert len(board.render_lines()) == 24


def test_arrow_keys_move_between_lanes_and_tasks(tmp_path):
    _, board = make_board(tmp_path)
    assert board.layout.get_selected_task().id == 2
    board.dispatch_key("down")
    assert board.layout.get_selected_task().id == 3
    board.dispatch_key("right")
    assert board.layout.get_current_status() == "in-progress"
    board.dispatch_key("b")
    assert board.layout.get_current_status() == "pending"


def test_number_keys_change_status_and_persist(tmp_path):
    path, board = make_board(tmp_path)
    board.dispatch_key("2")
    assert read_tasks(path).find(2).status == "in-progress"
    assert "Task #2 moved from pending to in-progress" in message(board)
    board.dispatch_key("u")
    assert read_tasks(path).find(2).status == "pending"


def test_blocked_done_shows_dependency_ids(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("down")
    board.dispatch_key("3")
    assert "Cannot mark as done" in message(board)
    assert "#2" in message(board)
    assert board.state.find_task(3).status == "pending"


def test_popups_stack_and_close(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("v")
    board.dispatch_key("h")
    assert [p.kind for p in board.overlays] == ["details", "help"]
    assert board.status_bar.mode == "help"
    assert "HELP & CONTROLS" in strip_ansi(board.render_text())

    # Board keys are swallowed while a popup is open.
    board.dispatch_key("right")
    assert board.layout.get_current_status() == "pending"

    board.dispatch_key("c")
    assert board.overlays.top.kind == "details"
    board.dispatch_key("escape")
    assert not board.overlays
    assert board.overlays.cursor_visible is True
    assert board.state.focus_mode == "board"


def test_statistics_popup(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("s")
    assert board.overlays.top.kind == "statistics"
    assert "BOARD STATISTICS" in strip_ansi(board.render_text())


def test_filter_mode_keys(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("f")
    assert board.status_bar.mode == "filter"
    board.dispatch_key("2")
    board.dispatch_key("2")
    assert [t.id for t in board.state.tasks] == [1, 2]
    assert "FILTER (1 active)" in strip_ansi(board.render_lines()[-1])
    board.dispatch_key("escape")
    assert board.status_bar.mode == "normal"
    assert [t.id for t in board.state.tasks] == [1, 2]
    board.dispatch_key("f")
    board.dispatch_key("f")
    assert len(board.state.tasks) == 5


def test_search_flow(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("/")
    assert board.status_bar.mode == "search"
    for key in "auth":
        board.dispatch_key(key)
    assert 'SEARCH: "auth_"' in strip_ansi(board.render_lines()[-1])
    board.dispatch_key("enter")
    assert board.status_bar.mode == "normal"
    assert [t.id for t in board.state.tasks] == [2]


def test_delete_and_edit_via_modal(tmp_path):
    path, board = make_board(tmp_path)
    board.dispatch_key("d")
    assert board.status_bar.mode == "confirm"
    board.dispatch_key("y")
    assert read_tasks(path).find(2) is None
    assert read_tasks(path).find(3).dependencies == []

    board.dispatch_key("e")
    assert board.modal.buffer == "Board view"
    board.dispatch_key("!")
    board.dispatch_key("enter")
    assert read_tasks(path).find(3).title == "Board view!"


def test_info_and_quit(tmp_path):
    _, board = make_board(tmp_path)
    board.dispatch_key("i")
    assert "ID: #2" in message(board)
    board.dispatch_key("q")
    assert board.should_exit


def test_render_frame_size_after_resize(tmp_path):
    _, board = make_board(tmp_path)
    board.resize(80, 24)
    lines = board.render_lines()
    assert len(lines) == 24
    assert all(visual_length(line) == 80 for line in lines)
    assert "+1 other" in strip_ansi("\n".join(lines))


def test_application_exits_on_q(tmp_path):
    _, board = make_board(tmp_path)
    with create_pipe_input() as pipe_input:
        with create_app_session(input=pipe_input, output=DummyOutput()):
            app = build_application(board, ttimeoutlen=0.01)
            assert isinstance(app, Application)
            assert app.ttimeoutlen == 0.01
            pipe_input.send_text("q")
            assert app.run() == 0
    assert board.should_exit
