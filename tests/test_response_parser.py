# tests/test_response_parser.py

from __future__ import annotations

from tasks_panel.sync.response_parser import parse_tasks
from tasks_panel.sync.task_models import Task


def test_parse_example_listing_skips_blank_row() -> None:
    text = "ID\tTITLE\tSTATUS\tDUE\n1\tBuy milk\tneedsAction\t2024-05-01\n\t\t\t\n2\tCall mom\tneedsAction\t"

    tasks = parse_tasks(text)

    assert tasks == [
        Task(id="1", title="Buy milk", status="needsAction", due_date="2024-05-01"),
        Task(id="2", title="Call mom", status="needsAction", due_date=None),
    ]


def test_header_only_or_empty_input_yields_nothing() -> None:
    assert parse_tasks("") == []
    assert parse_tasks("\n   \n\t\n") == []
    assert parse_tasks("ID\tTITLE\tSTATUS\tDUE\tUPDATED\n") == []


def test_first_non_blank_line_is_always_the_header() -> None:
    # Even a line that looks like a task is discarded when it comes first.
    text = "\n\n9\tLooks like a task\tneedsAction\n1\tReal\tneedsAction\n"
    assert [t.id for t in parse_tasks(text)] == ["1"]


def test_rows_with_too_few_fields_are_dropped() -> None:
    text = "HEADER\n1\tOnly two\n2\tThree\tneedsAction\nnotabs at all\n"
    tasks = parse_tasks(text)
    assert [t.id for t in tasks] == ["2"]


def test_rows_with_empty_id_or_title_are_dropped() -> None:
    text = (
        "HEADER\n"
        "\tNo id\tneedsAction\t2024-01-01\n"
        "5\t   \tneedsAction\n"
        "6\tKept\tneedsAction\n"
    )
    tasks = parse_tasks(text)
    assert [t.id for t in tasks] == ["6"]


def test_fields_are_trimmed_and_extra_columns_ignored() -> None:
    text = "HEADER\r\n  7 \t  Pay rent  \t completed \t 2024-06-01 \t2024-05-30T10:00:00Z\textra\r\n"

    (task,) = parse_tasks(text)

    assert task.id == "7"
    assert task.title == "Pay rent"
    assert task.status == "completed"
    assert task.due_date == "2024-06-01"
    assert task.is_completed


def test_whitespace_only_due_is_absent() -> None:
    (task,) = parse_tasks("HEADER\n1\tA\tneedsAction\t   \t2024-05-30\n")
    assert task.due_date is None


def test_order_is_preserved() -> None:
    text = "HEADER\n3\tC\tneedsAction\n1\tA\tneedsAction\n2\tB\tneedsAction\n"
    assert [t.id for t in parse_tasks(text)] == ["3", "1", "2"]


def test_duplicate_ids_keep_first_occurrence() -> None:
    text = "HEADER\n1\tFirst\tneedsAction\n1\tSecond\tneedsAction\n"
    tasks = parse_tasks(text)
    assert len(tasks) == 1
    assert tasks[0].title == "First"


def test_never_longer_than_non_header_lines() -> None:
    samples = [
        "garbage",
        "H\n\t\t\n\t\n",
        "H\na\tb\tc\nd\te\n\n\nf\tg\th\ti\tj\tk",
        "\t\t\t\nx\ty\tz\n",
    ]
    for text in samples:
        body = [ln for ln in text.split("\n") if ln.strip()][1:]
        assert len(parse_tasks(text)) <= len(body)
