"""
To-do tasks: listing, creation from assessments and recommendations, and the
read-time refresh of recurring tasks.
"""
from datetime import datetime
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from app.assessment_service import get_assessment, suggestion_categories
from app.date_utils import day_bounds
from app.exceptions import NotFoundError, ValidationError
from app.models import TaskCategory, TodoTask
from app.recommendation_parser import parse_recommendations
from app.recurrence import apply_recurrence, due_instances, resolve_category
from app.user_service import get_user
from app.logger import get_logger, timed_operation

logger = get_logger(__name__)


def get_recurring_tasks(db: Session, user_id: int) -> List[TodoTask]:
    return (
        db.query(TodoTask)
        .filter(TodoTask.user_id == user_id, TodoTask.recurring.is_(True))
        .order_by(TodoTask.scheduled_date.asc(), TodoTask.id.asc())
        .all()
    )


@timed_operation("refresh_recurring_tasks")
def refresh_recurring_tasks(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
) -> List[TodoTask]:
    """
    Create a new instance for every recurring series of the user that is due.

    Existing tasks are left untouched. Nothing guards against two concurrent
    refreshes for the same user both creating an instance.

    Returns:
        The newly created instances
    """
    now = now or datetime.now()
    created = due_instances(get_recurring_tasks(db, user_id), now)
    if created:
        db.add_all(created)
        db.commit()
        for task in created:
            db.refresh(task)
        logger.info(f"Materialized {len(created)} recurring task instance(s) for user {user_id}")
    return created


def get_daily_tasks(db: Session, user_id: int, now: Optional[datetime] = None) -> List[TodoTask]:
    """
    Today's tasks for a user, after catching up recurring series.
    """
    now = now or datetime.now()
    get_user(db, user_id)
    refresh_recurring_tasks(db, user_id, now)

    start, end = day_bounds(now)
    return (
        db.query(TodoTask)
        .filter(
            TodoTask.user_id == user_id,
            TodoTask.scheduled_date >= start,
            TodoTask.scheduled_date < end,
        )
        .order_by(TodoTask.scheduled_date.asc(), TodoTask.id.asc())
        .all()
    )


def get_tasks_for_user(db: Session, user_id: int) -> List[TodoTask]:
    get_user(db, user_id)
    return (
        db.query(TodoTask)
        .filter(TodoTask.user_id == user_id)
        .order_by(TodoTask.scheduled_date.asc(), TodoTask.id.asc())
        .all()
    )


def get_tasks_by_category(
    db: Session,
    user_id: int,
    category: Union[str, TaskCategory],
) -> List[TodoTask]:
    if not isinstance(category, TaskCategory):
        try:
            category = TaskCategory[str(category).upper()]
        except KeyError:
            raise ValidationError(f"Invalid task category: {category}")

    return (
        db.query(TodoTask)
        .filter(TodoTask.user_id == user_id, TodoTask.category == category)
        .order_by(TodoTask.scheduled_date.asc(), TodoTask.id.asc())
        .all()
    )


def create_task(
    db: Session,
    user_id: int,
    task: Optional[str],
    category: Union[str, TaskCategory],
    scheduled_date: Optional[datetime] = None,
    source_assessment_id: Optional[int] = None,
) -> TodoTask:
    """
    Create a single task. Recurrence always follows the category.
    """
    if task is None or not task.strip():
        raise ValidationError("Task description is required")
    if isinstance(category, str):
        try:
            category = TaskCategory[category.upper()]
        except KeyError:
            raise ValidationError(f"Invalid task category: {category}")

    user = get_user(db, user_id)
    todo = TodoTask(
        user_id=user.id,
        task=task.strip(),
        category=category,
        scheduled_date=scheduled_date or datetime.now(),
        source_assessment_id=source_assessment_id,
        completed=False,
    )
    apply_recurrence(todo)
    db.add(todo)
    db.commit()
    db.refresh(todo)
    return todo


def create_tasks_from_assessment(
    db: Session,
    user_id: int,
    assessment_id: int,
    category_tasks: Dict[str, List[str]],
    now: Optional[datetime] = None,
) -> List[TodoTask]:
    """
    Create tasks from a category → descriptions map tied to an assessment.

    Unknown category names fall back to DAILY. Blank descriptions are skipped.

    Raises:
        NotFoundError: unknown user, or the assessment is not the user's
    """
    user = get_user(db, user_id)
    assessment = get_assessment(db, assessment_id)
    if assessment.user_id != user.id:
        raise NotFoundError("Assessment not found")

    now = now or datetime.now()
    tasks = []
    for raw_category, descriptions in category_tasks.items():
        category = resolve_category(raw_category)
        for description in descriptions or []:
            if not description or not description.strip():
                continue
            todo = TodoTask(
                user_id=user.id,
                task=description.strip(),
                category=category,
                scheduled_date=now,
                source_assessment_id=assessment.id,
                completed=False,
            )
            tasks.append(apply_recurrence(todo))

    db.add_all(tasks)
    db.commit()
    for todo in tasks:
        db.refresh(todo)

    logger.info(f"Created {len(tasks)} task(s) from assessment {assessment_id} for user {user_id}")
    return tasks


def create_tasks_from_suggestions(
    db: Session,
    user_id: int,
    assessment_id: int,
    now: Optional[datetime] = None,
) -> List[TodoTask]:
    """Create tasks from the suggestions JSON stored on the assessment itself."""
    assessment = get_assessment(db, assessment_id)
    if assessment.user_id != user_id:
        raise NotFoundError("Assessment not found")
    return create_tasks_from_assessment(
        db, user_id, assessment_id, suggestion_categories(assessment), now=now
    )


def create_tasks_from_recommendations(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
) -> List[TodoTask]:
    """
    Run the recommendation parser over the user's stored text and save the
    resulting tasks. A user without recommendations gets no tasks.
    """
    user = get_user(db, user_id)
    drafts = parse_recommendations(user.recommendations, now or datetime.now())
    tasks = [draft.to_model(user.id) for draft in drafts]

    if tasks:
        db.add_all(tasks)
        db.commit()
        for todo in tasks:
            db.refresh(todo)
    return tasks


def get_task(db: Session, task_id: int) -> TodoTask:
    task = db.query(TodoTask).filter(TodoTask.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def update_task(db: Session, task_id: int, completed: bool) -> TodoTask:
    """Mark a task done or not done. Recurring series carry on regardless."""
    task = get_task(db, task_id)
    task.completed = completed
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = get_task(db, task_id)
    db.delete(task)
    db.commit()
