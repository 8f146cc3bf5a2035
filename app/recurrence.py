"""
Recurrence rules for to-do tasks.

Every task category maps to a fixed (recurring, pattern) pair. A recurring
series is due for a new instance once its most recent instance is older than
the pattern's period; due instances are new rows, existing rows are never
rescheduled.
"""
import re
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from app.date_utils import add_months
from app.models import TaskCategory, TodoTask
from app.logger import get_logger

logger = get_logger(__name__)


class Recurrence(NamedTuple):
    recurring: bool
    pattern: Optional[str]


RECURRENCE_BY_CATEGORY: Dict[TaskCategory, Recurrence] = {
    TaskCategory.DAILY: Recurrence(True, "DAILY"),
    TaskCategory.WEEKLY: Recurrence(True, "WEEKLY"),
    TaskCategory.MONTHLY: Recurrence(True, "MONTHLY"),
    TaskCategory.QUARTERLY: Recurrence(True, "QUARTERLY"),
    TaskCategory.SOCIAL: Recurrence(True, "WEEKLY"),
    TaskCategory.SELF_CARE: Recurrence(True, "DAILY"),
    TaskCategory.PROFESSIONAL: Recurrence(False, None),
}

# Spellings seen from clients that don't match an enum name once normalised
CATEGORY_ALIASES = {
    "SELFCARE": TaskCategory.SELF_CARE,
}

SeriesKey = Tuple[str, TaskCategory, Optional[str], Optional[int]]


def recurrence_for(category: TaskCategory) -> Recurrence:
    """Look up the (recurring, pattern) pair for a category."""
    return RECURRENCE_BY_CATEGORY[category]


def apply_recurrence(task: TodoTask) -> TodoTask:
    """Set a task's recurring flag and pattern from its category."""
    rule = recurrence_for(task.category)
    task.recurring = rule.recurring
    task.recurrence_pattern = rule.pattern
    return task


def resolve_category(raw: Union[str, TaskCategory, None]) -> TaskCategory:
    """
    Resolve a client-supplied category name, falling back to DAILY.

    Accepts enum names in any case as well as camelCase, hyphenated or
    spaced forms ("selfCare", "self-care", "Self Care").
    """
    if isinstance(raw, TaskCategory):
        return raw
    if not raw:
        return TaskCategory.DAILY

    name = re.sub(r'(?<=[a-z])(?=[A-Z])', '_', str(raw).strip())
    name = re.sub(r'[\s\-]+', '_', name).upper()

    if name in TaskCategory.__members__:
        return TaskCategory[name]
    if name in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[name]

    logger.warning(f"Unknown task category '{raw}', falling back to DAILY")
    return TaskCategory.DAILY


def is_due(pattern: Optional[str], last_scheduled: Optional[datetime], now: datetime) -> bool:
    """
    Decide whether a series needs a new instance.

    - DAILY: the last instance is on an earlier calendar day
    - WEEKLY: the last instance plus 7 days is before now
    - MONTHLY: the last instance plus one calendar month is before now
    - any other pattern is never due
    """
    if last_scheduled is None:
        return False
    if pattern == "DAILY":
        return last_scheduled.date() < now.date()
    if pattern == "WEEKLY":
        return last_scheduled + timedelta(weeks=1) < now
    if pattern == "MONTHLY":
        return add_months(last_scheduled, 1) < now
    return False


def series_key(task: TodoTask) -> SeriesKey:
    return (task.task, task.category, task.recurrence_pattern, task.source_assessment_id)


def latest_per_series(tasks: Iterable[TodoTask]) -> List[TodoTask]:
    """
    Reduce recurring tasks to the most recently scheduled instance of each
    series, in first-seen order.
    """
    latest: Dict[SeriesKey, TodoTask] = {}
    for task in tasks:
        if not task.recurring:
            continue
        key = series_key(task)
        current = latest.get(key)
        if current is None or task.scheduled_date > current.scheduled_date:
            latest[key] = task
    return list(latest.values())


def new_instance(template: TodoTask, now: datetime) -> TodoTask:
    """Build (but do not persist) the next instance of a recurring task."""
    return TodoTask(
        task=template.task,
        category=template.category,
        user_id=template.user_id,
        scheduled_date=now,
        recurring=template.recurring,
        recurrence_pattern=template.recurrence_pattern,
        source_assessment_id=template.source_assessment_id,
        completed=False,
    )


def due_instances(tasks: Iterable[TodoTask], now: datetime) -> List[TodoTask]:
    """
    Build new instances for every series whose latest instance is due.

    Args:
        tasks: A user's recurring tasks
        now: Reference moment

    Returns:
        Unsaved TodoTask instances scheduled at ``now``
    """
    created = []
    for latest in latest_per_series(tasks):
        if is_due(latest.recurrence_pattern, latest.scheduled_date, now):
            created.append(new_instance(latest, now))
    return created
