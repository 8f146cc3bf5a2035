"""
Scoring for the standard self-assessment questionnaires.

PHQ-9 (depression, 9 items) and GAD-7 (anxiety, 7 items) both answer each
item on a 0-3 scale; the total score is banded into a risk level.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Union

from app.exceptions import ValidationError
from app.logger import get_logger

logger = get_logger(__name__)

ANSWER_MIN = 0
ANSWER_MAX = 3
FOLLOW_UP_DAYS = 14

# (minimum score, label), highest band first
RISK_BANDS: Dict[str, List[Tuple[int, str]]] = {
    "PHQ-9": [
        (20, "Severe Depression"),
        (15, "Moderately Severe Depression"),
        (10, "Moderate Depression"),
        (5, "Mild Depression"),
        (0, "Minimal or No Depression"),
    ],
    "GAD-7": [
        (15, "Severe Anxiety"),
        (10, "Moderate Anxiety"),
        (5, "Mild Anxiety"),
        (0, "Minimal or No Anxiety"),
    ],
}

QUESTION_COUNTS = {
    "PHQ-9": 9,
    "GAD-7": 7,
}


@dataclass
class AssessmentScore:
    assessment_type: str
    score: int
    risk_level: str
    follow_up_date: date


def normalize_type(assessment_type: Optional[str]) -> str:
    """Canonicalise 'phq9', 'PHQ 9', 'gad-7' etc. to the table keys."""
    if not assessment_type or not assessment_type.strip():
        raise ValidationError("Assessment type is required")
    compact = assessment_type.strip().upper().replace(" ", "").replace("-", "").replace("_", "")
    for known in QUESTION_COUNTS:
        if compact == known.replace("-", ""):
            return known
    raise ValidationError(f"Unsupported assessment type: {assessment_type}")


def risk_level_for(assessment_type: str, score: int) -> str:
    for minimum, label in RISK_BANDS[normalize_type(assessment_type)]:
        if score >= minimum:
            return label
    raise ValidationError("Score cannot be negative")


def score_answers(
    assessment_type: str,
    answers: Union[Sequence[int], Dict[str, int]],
    today: Optional[date] = None,
) -> AssessmentScore:
    """
    Score a completed questionnaire.

    Args:
        assessment_type: "PHQ-9" or "GAD-7" (case/punctuation insensitive)
        answers: One 0-3 answer per question, as a list or a question->answer map
        today: Day the follow-up is counted from (defaults to today)

    Returns:
        AssessmentScore with total, risk level and a follow-up 14 days out
    """
    kind = normalize_type(assessment_type)
    values = list(answers.values()) if isinstance(answers, dict) else list(answers)

    expected = QUESTION_COUNTS[kind]
    if len(values) != expected:
        raise ValidationError(f"{kind} requires {expected} answers, got {len(values)}")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or not ANSWER_MIN <= value <= ANSWER_MAX:
            raise ValidationError(f"Answers must be integers between {ANSWER_MIN} and {ANSWER_MAX}")

    total = sum(values)
    today = today or date.today()
    result = AssessmentScore(
        assessment_type=kind,
        score=total,
        risk_level=risk_level_for(kind, total),
        follow_up_date=today + timedelta(days=FOLLOW_UP_DAYS),
    )
    logger.debug(f"Scored {kind}: {total} ({result.risk_level})")
    return result
