import pytest

from core import Task
from core.dependency_validator import (
    build_status_index,
    get_blocked_by_dependencies,
    get_dependent_tasks,
)
from core.status import Status, canonical_status, lane_for_status, normalize_task_status
from core.task import PrdSource, Subtask
from kanban.card_formatter import (
    create_compact_summary,
    create_metadata_line,
    create_progress_indicator,
    format_dependencies,
    format_priority,
    format_task_title,
    status_display,
)
from util.display import strip_ansi, visual_length


def test_normalize_accepts_aliases_and_spaces():
    assert normalize_task_status("In Progress") == "in-progress"
    assert normalize_task_status("in_progress") == "in-progress"
    assert normalize_task_status("completed") == "done"
    assert normalize_task_status("canceled") == "cancelled"


def test_normalize_unknown_raises_unless_allowed():
    with pytest.raises(ValueError):
        normalize_task_status("review")
    assert normalize_task_status("Review", allow_unknown=True) == "review"


def test_lane_for_status_folds_side_and_unknown_into_pending():
    assert lane_for_status("done") == "done"
    assert lane_for_status("blocked") == "pending"
    assert lane_for_status("whatever") == "pending"
    assert lane_for_status("") == "pending"


def test_status_from_string():
    assert Status.from_string("DONE") is Status.DONE
    assert Status.from_string("nope") is Status.PENDING
    assert Status.IN_PROGRESS.label == "IN PROGRESS"


def test_gate_reports_incomplete_in_declaration_order():
    index = {1: "done", 2: "pending", 3: "in-progress"}
    assert get_blocked_by_dependencies([3, 1, 2], index) == [3, 2]
    assert get_blocked_by_dependencies([], index) == []


def test_gate_treats_missing_dependency_as_incomplete():
    assert get_blocked_by_dependencies([42], {1: "done"}) == [42]


def test_dependency_lookups():
    tasks = [Task(id=1), Task(id=2, dependencies=[1]), Task(id=3, dependencies=[1, 2])]
    assert build_status_index(tasks) == {1: "pending", 2: "pending", 3: "pending"}
    assert [t.id for t in get_dependent_tasks(1, tasks)] == [2, 3]


def test_status_display_for_known_and_unknown():
    assert status_display("done") == ("✅", "DONE", "status.done")
    glyph, name, style = status_display("review")
    assert glyph == "❓" and name == "REVIEW" and style == "text.muted"


def test_priority_badges():
    assert strip_ansi(format_priority("high")) == "🔴 High"
    assert strip_ansi(format_priority("critical", compact=True)) == "🟣C"
    assert strip_ansi(format_priority(None)) == "⚪ None"


def test_dependency_badge_text():
    assert format_dependencies([]) == ""
    assert strip_ansi(format_dependencies([1, 2])) == "Deps: 2"
    assert strip_ansi(format_dependencies([1, 2, 3, 4], compact=True)) == "D:4"


def test_task_title_is_truncated_to_width():
    line = format_task_title("A fairly long task title that will not fit", 20, 12)
    assert visual_length(line) <= 20
    assert strip_ansi(line).startswith("#12 ")
    assert strip_ansi(format_task_title("", 30, 1)) == "#1 Untitled Task"


def test_metadata_line_lists_badges():
    task = Task(
        id=1,
        priority="low",
        dependencies=[2],
        subtasks=[Subtask(id=1)],
        prd_source=PrdSource(file_name="prd.md"),
    )
    text = strip_ansi(create_metadata_line(task, 60))
    assert "Low" in text and "Deps: 1" in text and "prd.md" in text and "Sub: 1" in text
    assert "S:1" in strip_ansi(create_metadata_line(task, 60, compact=True))


def test_compact_summary_fits():
    task = Task(id=5, title="Compact card title", priority="high")
    summary = create_compact_summary(task, 18)
    assert visual_length(summary) <= 18
    assert strip_ansi(summary).startswith("#5 ")


def test_progress_indicator():
    assert create_progress_indicator(0, 0) == ""
    assert strip_ansi(create_progress_indicator(1, 2, width=4)) == "██░░ 50%"


def test_status_index_uses_canonical_tokens():
    tasks = [Task(id=1, status="completed"), Task(id=2, status="In Progress"), Task(id=3, status="")]
    index = build_status_index(tasks)
    assert index == {1: "done", 2: "in-progress", 3: "pending"}
    assert get_blocked_by_dependencies([1, 2, 3], index) == [2, 3]
    assert canonical_status("DONE") == "done"
