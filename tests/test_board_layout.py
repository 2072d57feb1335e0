from core import Task
from kanban.board_layout import BoardLayout, completion_percentage
from kanban.popups import HelpPopup, TaskDetailsPopup
from util.display import strip_ansi, visual_length


def sample_tasks():
    return [
        Task(id=1, title="One", status="pending"),
        Task(id=2, title="Two", status="pending"),
        Task(id=3, title="Three", status="pending"),
        Task(id=4, title="Blocked", status="blocked"),
        Task(id=5, title="Review", status="review"),
        Task(id=6, title="Six", status="in-progress"),
        Task(id=7, title="Seven", status="In Progress"),
        Task(id=8, title="Eight", status="done"),
    ]


def test_load_buckets_tasks_and_counts_folded():
    layout = BoardLayout(120, 30)
    layout.load_tasks(sample_tasks())
    assert [t.id for t in layout.get_column("pending").tasks] == [1, 2, 3, 4, 5]
    assert [t.id for t in layout.get_column("in-progress").tasks] == [6, 7]
    assert [t.id for t in layout.get_column("done").tasks] == [8]
    assert layout.folded_count == 2
    assert layout.get_column("pending").folded_count == 2
    assert layout.get_column("done").folded_count == 0


def test_every_task_lands_in_exactly_one_lane():
    layout = BoardLayout()
    tasks = sample_tasks()
    layout.load_tasks(tasks)
    assert sorted(t.id for t in layout.all_visible_tasks()) == [t.id for t in tasks]


def test_load_selects_first_task_of_active_lane():
    layout = BoardLayout()
    layout.load_tasks(sample_tasks())
    assert layout.get_current_status() == "pending"
    assert layout.get_selected_task().id == 1
    assert layout.get_column("in-progress").selected_index == -1


def test_load_keeps_selection_by_id():
    layout = BoardLayout()
    tasks = sample_tasks()
    layout.load_tasks(tasks)
    layout.get_current_column().set_selected_task(2)
    layout.load_tasks([tasks[2], tasks[0], tasks[1]])
    assert layout.get_selected_task().id == 3


def test_column_switch_moves_active_flag_and_selection():
    layout = BoardLayout()
    layout.load_tasks(sample_tasks())
    layout.move_to_next_column()
    assert layout.get_current_status() == "in-progress"
    assert layout.get_column("pending").is_active is False
    assert layout.get_column("pending").selected_index == -1
    assert layout.get_column("in-progress").is_active is True
    assert layout.get_selected_task().id == 6
    layout.move_to_previous_column()
    layout.move_to_previous_column()
    assert layout.get_current_status() == "done"


def test_select_task_id_switches_lane():
    layout = BoardLayout()
    layout.load_tasks(sample_tasks())
    assert layout.select_task_id(8) is True
    assert layout.get_current_status() == "done"
    assert layout.select_task_id(99) is False


def test_resize_keeps_active_lane_and_selection():
    layout = BoardLayout(120, 30)
    layout.load_tasks(sample_tasks())
    layout.move_to_next_column()
    layout.get_current_column().move_selection_down()
    selected = layout.get_selected_task().id

    assert layout.resize(80, 24) is True
    assert layout.get_current_column().width == 24
    assert layout.get_current_column().width < 38
    assert layout.get_current_status() == "in-progress"
    assert layout.get_current_column().is_active
    assert layout.get_selected_task().id == selected
    assert layout.resize(80, 24) is False


def test_statistics_and_percentage():
    layout = BoardLayout()
    layout.load_tasks(sample_tasks())
    stats = layout.get_statistics()
    assert stats.status_counts == {"pending": 5, "in-progress": 2, "done": 1}
    assert stats.total_tasks == 8
    assert stats.completed_tasks == 1
    # 12.5 rounds half up
    assert stats.completion_percentage == 13
    assert stats.folded_tasks == 2


def test_completion_percentage_empty_board():
    assert completion_percentage(0, 0) == 0
    assert completion_percentage(1, 3) == 33
    assert completion_percentage(2, 3) == 67


def test_render_fills_terminal():
    layout = BoardLayout(120, 30)
    layout.load_tasks(sample_tasks())
    frame = layout.render("STATUS LINE")
    assert len(frame) == 30
    assert all(visual_length(row) == 120 for row in frame)
    assert strip_ansi(frame[-1]).startswith("STATUS LINE")


def test_board_lines_join_three_lanes():
    layout = BoardLayout(120, 30)
    layout.load_tasks(sample_tasks())
    lines = layout.generate_board_lines()
    assert len(lines) == 26
    assert visual_length(lines[0]) == 38 * 3 + 2 * 2


def test_overlays_are_drawn_in_stack_order():
    layout = BoardLayout(120, 30)
    tasks = sample_tasks()
    layout.load_tasks(tasks)
    details = TaskDetailsPopup(tasks[0])
    help_popup = HelpPopup()

    text = strip_ansi("\n".join(layout.render("", [details, help_popup])))
    assert "HELP & CONTROLS" in text
    assert "Task #1 Details" not in text

    text = strip_ansi("\n".join(layout.render("", [help_popup, details])))
    assert "Task #1 Details" in text


def test_render_screen_prefixes_control_sequences():
    layout = BoardLayout()
    screen = layout.render_screen("x")
    assert screen.startswith("\x1b[2J\x1b[1;1H\x1b[?25l")
