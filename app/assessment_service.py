"""
Assessment storage and retrieval.
"""
import json
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from app.date_utils import parse_iso_date
from app.exceptions import NotFoundError, ValidationError
from app.models import Assessment
from app.scoring import score_answers
from app.user_service import get_user
from app.logger import get_logger

logger = get_logger(__name__)


def encode_suggestions(suggestions: Any) -> Optional[str]:
    """Store text as-is; JSON-encode structured suggestions."""
    if suggestions is None or isinstance(suggestions, str):
        return suggestions
    return json.dumps(suggestions)


def save_assessment(
    db: Session,
    user_id: int,
    assessment_type: Optional[str],
    score: Optional[int] = None,
    risk_level: Optional[str] = None,
    follow_up_date: Optional[Union[str, date]] = None,
    suggestions: Any = None,
    answers: Optional[Union[Sequence[int], Dict[str, int]]] = None,
) -> Assessment:
    """
    Save an assessment for a user.

    Either a precomputed ``score`` or the raw questionnaire ``answers`` must
    be given. When answers are given they are scored, and the computed risk
    level and follow-up date fill in whatever the caller left out.

    Raises:
        NotFoundError: unknown user
        ValidationError: missing type/score or a malformed date
    """
    user = get_user(db, user_id)

    if not assessment_type or not assessment_type.strip():
        raise ValidationError("Assessment type is required")

    follow_up = parse_iso_date(follow_up_date)

    if answers is not None:
        result = score_answers(assessment_type, answers)
        assessment_type = result.assessment_type
        score = result.score
        risk_level = risk_level or result.risk_level
        follow_up = follow_up or result.follow_up_date
    elif score is None:
        raise ValidationError("Score is required")

    assessment = Assessment(
        user_id=user.id,
        assessment_type=assessment_type.strip(),
        score=score,
        risk_level=risk_level,
        follow_up_date=follow_up,
        suggestions=encode_suggestions(suggestions),
    )
    db.add(assessment)
    db.commit()
    db.refresh(assessment)

    logger.info(
        f"Saved {assessment.assessment_type} assessment {assessment.id} for user {user.id} "
        f"(score={assessment.score}, risk={assessment.risk_level})"
    )
    return assessment


def get_assessments_for_user(db: Session, user_id: int) -> List[Assessment]:
    """A user's assessments, newest first."""
    return (
        db.query(Assessment)
        .filter(Assessment.user_id == user_id)
        .order_by(Assessment.created_at.desc(), Assessment.id.desc())
        .all()
    )


def get_assessment(db: Session, assessment_id: int) -> Assessment:
    assessment = db.query(Assessment).filter(Assessment.id == assessment_id).first()
    if not assessment:
        raise NotFoundError("Assessment not found")
    return assessment


def suggestion_categories(assessment: Assessment) -> Dict[str, List[str]]:
    """
    Read the category → tasks map out of an assessment's JSON suggestions.

    Expects ``{"categories": {"daily": {"title": ..., "tasks": [...]}, ...}}``;
    a bare ``{"daily": [...]}`` map is accepted too.

    Raises:
        ValidationError: suggestions are missing or not in either shape
    """
    if not assessment.suggestions:
        raise ValidationError("Assessment has no suggestions")
    try:
        data = json.loads(assessment.suggestions)
    except json.JSONDecodeError:
        raise ValidationError("Assessment suggestions are not structured JSON")

    if not isinstance(data, dict):
        raise ValidationError("Assessment suggestions are not structured JSON")
    categories = data.get("categories", data)
    if not isinstance(categories, dict):
        raise ValidationError("Assessment suggestions have no categories")

    result: Dict[str, List[str]] = {}
    for key, value in categories.items():
        tasks = value.get("tasks", []) if isinstance(value, dict) else value
        if isinstance(tasks, list):
            result[key] = [str(t) for t in tasks if isinstance(t, str) and t.strip()]
    return result
