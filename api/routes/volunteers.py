from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import volunteer_service
from app.db import get_db
from auth.jwt_handler import create_access_token
from schemas.users import LoginRequest
from schemas.volunteers import RejectRequest, VolunteerCreate, VolunteerResponse

router = APIRouter(prefix="/api/volunteers", tags=["Volunteers"])


@router.post("/register")
def register(payload: VolunteerCreate, db: Session = Depends(get_db)):
    volunteer = volunteer_service.register_volunteer(db, **payload.model_dump())
    return {
        "message": "Registration successful. Your application is pending approval.",
        "volunteer": {
            "id": volunteer.id,
            "username": volunteer.username,
            "email": volunteer.email,
            "approved": volunteer.approved,
        },
    }


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    if payload.username is None or payload.password is None:
        raise HTTPException(status_code=400, detail="Username and password are required")

    volunteer = volunteer_service.login_volunteer(db, payload.username, payload.password)
    return {
        "message": "Login successful",
        "volunteer": {
            "id": volunteer.id,
            "username": volunteer.username,
            "email": volunteer.email,
            "full_name": volunteer.full_name,
            "role": "VOLUNTEER",
        },
        "access_token": create_access_token({"sub": str(volunteer.id), "role": "VOLUNTEER"}),
        "token_type": "bearer",
    }


@router.get("/pending", response_model=List[VolunteerResponse])
def pending(db: Session = Depends(get_db)):
    return [v.to_dict() for v in volunteer_service.list_pending(db)]


@router.get("/approved", response_model=List[VolunteerResponse])
def approved(db: Session = Depends(get_db)):
    return [v.to_dict() for v in volunteer_service.list_approved(db)]


@router.post("/{volunteer_id}/approve")
def approve(volunteer_id: int, db: Session = Depends(get_db)):
    volunteer = volunteer_service.approve_volunteer(db, volunteer_id)
    return {"message": "Volunteer approved successfully", "volunteer": volunteer.to_dict()}


@router.post("/{volunteer_id}/reject")
def reject(volunteer_id: int, payload: RejectRequest, db: Session = Depends(get_db)):
    volunteer = volunteer_service.reject_volunteer(db, volunteer_id, payload.reason)
    return {"message": "Volunteer rejected", "volunteer": volunteer.to_dict()}


@router.delete("/{volunteer_id}")
def delete(volunteer_id: int, db: Session = Depends(get_db)):
    volunteer_service.delete_volunteer(db, volunteer_id)
    return {"message": "Volunteer deleted successfully"}


@router.get("/{volunteer_id}", response_model=VolunteerResponse)
def get_volunteer(volunteer_id: int, db: Session = Depends(get_db)):
    return volunteer_service.get_volunteer(db, volunteer_id).to_dict()
