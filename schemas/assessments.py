from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel


class AssessmentCreate(BaseModel):
    """Either ``score`` or raw questionnaire ``answers`` must be supplied."""
    user_id: int
    assessment_type: Optional[str] = None
    score: Optional[int] = None
    risk_level: Optional[str] = None
    follow_up_date: Optional[str] = None
    suggestions: Optional[Any] = None
    answers: Optional[Union[List[int], Dict[str, int]]] = None


class ScoreRequest(BaseModel):
    assessment_type: str
    answers: Union[List[int], Dict[str, int]]


class ScoreResponse(BaseModel):
    assessment_type: str
    score: int
    risk_level: str
    follow_up_date: str


class AssessmentResponse(BaseModel):
    id: int
    user_id: int
    assessment_type: str
    score: int
    risk_level: Optional[str] = None
    follow_up_date: Optional[str] = None
    suggestions: Optional[str] = None
    created_at: Optional[str] = None
