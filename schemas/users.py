from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    recommendations: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LocationUpdate(BaseModel):
    latitude: float
    longitude: float


class RecommendationsUpdate(BaseModel):
    recommendations: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    username: str
    created_at: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    assessment_count: int = 0
    todo_task_count: int = 0


class Token(BaseModel):
    access_token: str
    token_type: str
