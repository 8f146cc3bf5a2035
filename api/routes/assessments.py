from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import assessment_service
from app.db import get_db
from app.scoring import score_answers
from schemas.assessments import (
    AssessmentCreate,
    AssessmentResponse,
    ScoreRequest,
    ScoreResponse,
)

router = APIRouter(prefix="/api/assessments", tags=["Assessments"])


@router.post("", response_model=AssessmentResponse)
def save_assessment(payload: AssessmentCreate, db: Session = Depends(get_db)):
    assessment = assessment_service.save_assessment(db, **payload.model_dump())
    return assessment.to_dict()


@router.post("/score", response_model=ScoreResponse)
def score(payload: ScoreRequest):
    """Score a questionnaire without saving it."""
    result = score_answers(payload.assessment_type, payload.answers)
    return ScoreResponse(
        assessment_type=result.assessment_type,
        score=result.score,
        risk_level=result.risk_level,
        follow_up_date=result.follow_up_date.isoformat(),
    )


@router.get("/user/{user_id}", response_model=List[AssessmentResponse])
def assessments_for_user(user_id: int, db: Session = Depends(get_db)):
    return [a.to_dict() for a in assessment_service.get_assessments_for_user(db, user_id)]


@router.get("/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(assessment_id: int, db: Session = Depends(get_db)):
    return assessment_service.get_assessment(db, assessment_id).to_dict()
