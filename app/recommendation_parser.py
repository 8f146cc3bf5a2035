"""
Rule-based extraction of to-do tasks from a user's recommendation text.

Recommendations are markdown-ish text with sections headed by a literal
marker such as ``### **Daily Practices**``. Each bulleted or numbered line in
a known section becomes one task draft.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from app.date_utils import at_time
from app.models import TaskCategory, TodoTask
from app.recurrence import recurrence_for
from app.logger import get_logger

logger = get_logger(__name__)

HEADER_PREFIX = "### **"

DASH_BULLET = re.compile(r'^-\s+')
NUMBER_BULLET = re.compile(r'^\d+\.\s+')


@dataclass(frozen=True)
class Section:
    title: str
    category: TaskCategory
    offset_days: int

    @property
    def header(self) -> str:
        return f"{HEADER_PREFIX}{self.title}**"


SECTIONS = (
    Section("Daily Practices", TaskCategory.DAILY, 0),
    Section("Weekly Practices", TaskCategory.WEEKLY, 7),
    Section("Monthly Check-Ins", TaskCategory.MONTHLY, 30),
    Section("Quarterly Goals", TaskCategory.QUARTERLY, 90),
)


@dataclass
class TaskDraft:
    """An unsaved task produced from recommendation text."""
    task: str
    category: TaskCategory
    scheduled_date: datetime
    recurring: bool
    recurrence_pattern: Optional[str]
    completed: bool = False

    def to_model(self, user_id: int, source_assessment_id: Optional[int] = None) -> TodoTask:
        return TodoTask(
            user_id=user_id,
            task=self.task,
            category=self.category,
            scheduled_date=self.scheduled_date,
            recurring=self.recurring,
            recurrence_pattern=self.recurrence_pattern,
            completed=self.completed,
            source_assessment_id=source_assessment_id,
        )


def section_body(text: str, section: Section) -> Optional[str]:
    """
    Get the span from a section's header up to the next header (or the end
    of the text), or None if the header is absent.
    """
    start = text.find(section.header)
    if start == -1:
        return None
    next_header = text.find(HEADER_PREFIX, start + 1)
    return text[start:next_header] if next_header != -1 else text[start:]


def extract_items(body: str) -> List[str]:
    """
    Pull list items out of a section body.

    A line counts when, once trimmed, it starts with "- " or "<n>. ".
    The bullet is removed and blank remainders are dropped.
    """
    items = []
    for line in body.split("\n"):
        line = line.strip()
        if not (line.startswith("- ") or NUMBER_BULLET.match(line)):
            continue
        item = DASH_BULLET.sub("", line, count=1)
        item = NUMBER_BULLET.sub("", item, count=1).strip()
        if item:
            items.append(item)
    return items


def parse_recommendations(
    text: Optional[str],
    reference: Union[date, datetime],
) -> List[TaskDraft]:
    """
    Derive task drafts from recommendation text.

    Args:
        text: Recommendation text (may be None or empty)
        reference: Day the schedule offsets are counted from

    Returns:
        Task drafts in section order, each at 09:00 on its section's date
    """
    if not text:
        return []

    if isinstance(reference, datetime):
        reference = reference.date()

    drafts: List[TaskDraft] = []
    for section in SECTIONS:
        body = section_body(text, section)
        if body is None:
            continue

        scheduled = at_time(reference + timedelta(days=section.offset_days))
        rule = recurrence_for(section.category)
        items = extract_items(body)
        drafts.extend(
            TaskDraft(
                task=item,
                category=section.category,
                scheduled_date=scheduled,
                recurring=rule.recurring,
                recurrence_pattern=rule.pattern,
            )
            for item in items
        )
        logger.debug(f"Section '{section.title}': {len(items)} item(s)")

    logger.info(f"Derived {len(drafts)} task(s) from recommendations")
    return drafts
