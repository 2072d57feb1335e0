from core import Task
from core.task import PrdSource, Subtask
from kanban.board_controls import BoardControlsHandler
from kanban.board_state import BoardState
from kanban.filters import FilterSet, apply_filters, matches_search, next_in_cycle, validate_filter
from kanban.modal_input import ModalInput
from kanban.overlays import OverlayStack


def ten_tasks():
    priorities = ["high", "low", "medium", "high", "low", "medium", "critical", "high", "low", "medium"]
    return [Task(id=i + 1, title=f"Task {i + 1}", priority=p) for i, p in enumerate(priorities)]


def make_handler(tasks=None):
    state = BoardState.from_tasks(tasks if tasks is not None else ten_tasks())
    overlays = OverlayStack()
    modal = ModalInput()
    return state, BoardControlsHandler(state, overlays, modal), overlays, modal


def test_priority_filter_and_clear_restores_order():
    state, controls, _, _ = make_handler()
    result = controls.apply_priority_filter("high")
    assert result.success
    assert [t.id for t in state.tasks] == [1, 4, 8]
    assert state.layout.get_statistics().total_tasks == 3

    controls.clear_all_filters()
    assert [t.id for t in state.tasks] == list(range(1, 11))
    assert state.original_tasks is None


def test_filters_compose_from_original_list():
    tasks = ten_tasks()
    tasks[0].status = "done"
    state, controls, _, _ = make_handler(tasks)
    controls.apply_priority_filter("high")
    controls.apply_status_filter("pending")
    assert [t.id for t in state.tasks] == [4, 8]

    controls.apply_priority_filter(None)
    assert [t.id for t in state.tasks] == list(range(2, 11))


def test_invalid_filter_leaves_state_unchanged():
    state, controls, _, _ = make_handler()
    result = controls.apply_priority_filter("urgent")
    assert result.success is False
    assert result.reason == "Invalid priority: urgent"
    assert state.filters.priority is None
    assert len(state.tasks) == 10
    assert controls.apply_status_filter("review").success is False


def test_search_matches_title_description_and_id():
    tasks = [
        Task(id=1, title="Implement AUTH flow"),
        Task(id=2, title="Refresh board"),
        Task(id=3, title="Misc", description="oauth callback"),
        Task(id=4, title="Other"),
    ]
    state, controls, _, _ = make_handler(tasks)
    controls.set_search_query("auth")
    assert [t.id for t in state.tasks] == [1, 3]
    controls.set_search_query("  ")
    assert [t.id for t in state.tasks] == [1, 2, 3, 4]
    assert matches_search(tasks[3], "4")


def test_flag_filters():
    tasks = [
        Task(id=1, prd_source=PrdSource(file_name="prd.md")),
        Task(id=2, subtasks=[Subtask(id=1)]),
        Task(id=3, dependencies=[1]),
    ]
    assert [t.id for t in apply_filters(tasks, FilterSet(prd_source=True))] == [1]
    assert [t.id for t in apply_filters(tasks, FilterSet(has_subtasks=False))] == [1, 3]
    assert [t.id for t in apply_filters(tasks, FilterSet(has_dependencies=True))] == [3]


def test_validate_and_cycle_helpers():
    assert validate_filter("colour", "red") == "Unknown filter: colour"
    assert validate_filter("has_subtasks", "yes").startswith("Invalid value")
    assert validate_filter("status", None) is None
    assert next_in_cycle((None, True, False), False) is None
    assert next_in_cycle((None, "a"), "zzz") == "a"


def test_toggle_filter_mode_clears_on_exit():
    state, controls, _, _ = make_handler()
    assert controls.toggle_filter().message == "Filter mode enabled"
    controls.handle_filter_key("2")
    assert state.filters.priority == "critical"
    assert [t.id for t in state.tasks] == [7]

    result = controls.toggle_filter()
    assert result.message == "Filter mode disabled"
    assert state.is_filter_mode is False
    assert state.filters.is_empty()
    assert len(state.tasks) == 10


def test_filter_keys_cycle_clear_and_exit():
    state, controls, _, _ = make_handler()
    controls.toggle_filter()
    controls.handle_filter_key("2")
    controls.handle_filter_key("2")
    assert state.filters.priority == "high"
    controls.handle_filter_key("4")
    assert state.filters.has_subtasks is True
    assert controls.get_active_filters() == {"priority": "high", "has_subtasks": True}

    controls.handle_filter_key("c")
    assert state.filters.is_empty()

    controls.handle_filter_key("1")
    controls.handle_filter_key("escape")
    assert state.is_filter_mode is False
    assert state.filters.status == "pending"
    assert controls.handle_filter_key("x").success is False


def test_search_modal_commit_and_cancel():
    tasks = [Task(id=1, title="auth"), Task(id=2, title="board")]
    state, controls, _, modal = make_handler(tasks)

    assert controls.open_search().requires_input
    assert state.is_search_mode
    for key in ("a", "u", "t", "x", "backspace", "h", "enter"):
        modal.feed(key)
    assert state.search_query == "auth"
    assert state.is_search_mode is False
    assert [t.id for t in state.tasks] == [1]

    controls.open_search()
    assert modal.buffer == "auth"
    modal.feed("z")
    modal.feed("escape")
    assert state.search_query == "auth"
    assert modal.active is False


def test_cycle_focus_opens_and_closes_popups():
    state, controls, overlays, _ = make_handler()
    controls.cycle_focus()
    assert state.focus_mode == "details"
    assert overlays.is_open("details")
    assert overlays.cursor_visible is False

    controls.cycle_focus()
    assert state.focus_mode == "help"
    assert not overlays.is_open("details") and overlays.is_open("help")

    controls.cycle_focus()
    assert state.focus_mode == "board"
    assert len(overlays) == 0
    assert overlays.cursor_visible is True
    assert controls.set_focus("sidebar").success is False


def test_board_state_snapshot_and_reset():
    state, controls, _, _ = make_handler()
    controls.toggle_filter()
    controls.apply_priority_filter("low")
    info = controls.get_board_state()
    assert info["filtered_task_count"] == 3
    assert info["original_task_count"] == 10
    controls.reset()
    assert controls.get_board_state() == {
        "is_filter_mode": False,
        "is_search_mode": False,
        "focus_mode": "board",
        "active_filters": {},
        "search_query": "",
        "filtered_task_count": 10,
        "original_task_count": 10,
    }


def test_describe_active_filters():
    filters = FilterSet(priority="high", has_dependencies=False)
    assert filters.describe() == ["Priority: high", "Dependencies: No"]
    assert filters.active_count() == 2
    filters.clear()
    assert filters.is_empty()
    assert filters.active() == {}
