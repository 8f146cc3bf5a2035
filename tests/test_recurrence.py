# tests/test_recurrence.py

from datetime import datetime

import pytest

from app.date_utils import add_months
from app.models import TaskCategory, TodoTask
from app.recurrence import (
    apply_recurrence,
    due_instances,
    is_due,
    latest_per_series,
    recurrence_for,
    resolve_category,
)


def make_task(text: str, category: TaskCategory, scheduled: datetime, source=None) -> TodoTask:
    task = TodoTask(
        user_id=1,
        task=text,
        category=category,
        scheduled_date=scheduled,
        source_assessment_id=source,
        completed=False,
    )
    return apply_recurrence(task)


@pytest.mark.parametrize(
    "category, recurring, pattern",
    [
        (TaskCategory.DAILY, True, "DAILY"),
        (TaskCategory.WEEKLY, True, "WEEKLY"),
        (TaskCategory.MONTHLY, True, "MONTHLY"),
        (TaskCategory.QUARTERLY, True, "QUARTERLY"),
        (TaskCategory.SOCIAL, True, "WEEKLY"),
        (TaskCategory.SELF_CARE, True, "DAILY"),
        (TaskCategory.PROFESSIONAL, False, None),
    ],
)
def test_category_recurrence_table(category, recurring, pattern) -> None:
    assert recurrence_for(category) == (recurring, pattern)


def test_daily_is_due_on_a_later_calendar_day() -> None:
    last = datetime(2026, 3, 9, 23, 59)
    assert is_due("DAILY", last, datetime(2026, 3, 10, 0, 1))
    assert not is_due("DAILY", datetime(2026, 3, 10, 0, 0), datetime(2026, 3, 10, 23, 59))


def test_weekly_is_due_strictly_after_seven_days() -> None:
    last = datetime(2026, 3, 1, 9, 0)
    assert not is_due("WEEKLY", last, datetime(2026, 3, 8, 9, 0))
    assert is_due("WEEKLY", last, datetime(2026, 3, 8, 9, 1))


def test_monthly_uses_calendar_months() -> None:
    last = datetime(2026, 1, 31, 9, 0)
    assert add_months(last, 1) == datetime(2026, 2, 28, 9, 0)
    assert not is_due("MONTHLY", last, datetime(2026, 2, 28, 9, 0))
    assert is_due("MONTHLY", last, datetime(2026, 2, 28, 10, 0))


def test_other_patterns_are_never_due() -> None:
    long_ago = datetime(2020, 1, 1)
    now = datetime(2026, 3, 10)
    assert not is_due("QUARTERLY", long_ago, now)
    assert not is_due(None, long_ago, now)
    assert not is_due("YEARLY", long_ago, now)


def test_only_the_latest_instance_of_a_series_counts() -> None:
    tasks = [
        make_task("walk", TaskCategory.DAILY, datetime(2026, 3, 8, 9, 0)),
        make_task("walk", TaskCategory.DAILY, datetime(2026, 3, 10, 8, 0)),
        make_task("walk", TaskCategory.DAILY, datetime(2026, 3, 9, 9, 0)),
        make_task("walk", TaskCategory.DAILY, datetime(2026, 3, 1, 9, 0), source=7),
    ]
    latest = latest_per_series(tasks)
    assert [(t.scheduled_date, t.source_assessment_id) for t in latest] == [
        (datetime(2026, 3, 10, 8, 0), None),
        (datetime(2026, 3, 1, 9, 0), 7),
    ]

    created = due_instances(tasks, datetime(2026, 3, 10, 12, 0))
    assert len(created) == 1
    assert created[0].source_assessment_id == 7


def test_due_instances_copy_the_series_and_start_open() -> None:
    template = make_task("call a friend", TaskCategory.SOCIAL, datetime(2026, 3, 1, 9, 0), source=3)
    template.completed = True
    now = datetime(2026, 3, 9, 18, 30)

    (instance,) = due_instances([template], now)
    assert instance.task == "call a friend"
    assert instance.category == TaskCategory.SOCIAL
    assert instance.recurring is True
    assert instance.recurrence_pattern == "WEEKLY"
    assert instance.source_assessment_id == 3
    assert instance.scheduled_date == now
    assert instance.completed is False


def test_non_recurring_tasks_are_ignored() -> None:
    task = make_task("see a therapist", TaskCategory.PROFESSIONAL, datetime(2020, 1, 1))
    assert due_instances([task], datetime(2026, 3, 10)) == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("daily", TaskCategory.DAILY),
        ("WEEKLY", TaskCategory.WEEKLY),
        ("selfCare", TaskCategory.SELF_CARE),
        ("self-care", TaskCategory.SELF_CARE),
        ("Self Care", TaskCategory.SELF_CARE),
        ("selfcare", TaskCategory.SELF_CARE),
        ("professional", TaskCategory.PROFESSIONAL),
        ("mindfulness", TaskCategory.DAILY),
        ("", TaskCategory.DAILY),
        (None, TaskCategory.DAILY),
    ],
)
def test_resolve_category(raw, expected) -> None:
    assert resolve_category(raw) == expected
