from typing import Optional

from pydantic import BaseModel, Field


class VolunteerCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    credentials: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)
    certificate_image: Optional[str] = None
    id_proof_image: Optional[str] = None


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class VolunteerResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    credentials: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[int] = None
    approved: bool
    active: bool
    rejection_reason: Optional[str] = None
    created_at: Optional[str] = None
