from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app import user_service
from app.db import get_db
from app.models import User
from auth.jwt_handler import create_access_token
from auth.oauth2 import get_current_user
from schemas.users import (
    LocationUpdate,
    LoginRequest,
    RecommendationsUpdate,
    Token,
    UserCreate,
    UserSummary,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "role": "USER"})


@router.post("/register")
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_service.register_user(
        db,
        username=payload.username,
        password=payload.password,
        latitude=payload.latitude,
        longitude=payload.longitude,
        recommendations=payload.recommendations,
    )
    return {
        "message": "Registration successful",
        "user": {"id": user.id, "username": user.username},
    }


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    if payload.username is None or payload.password is None:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = user_service.login_user(db, payload.username, payload.password)
    return {
        "message": "Login successful",
        "user": {"id": user.id, "username": user.username},
        "access_token": issue_token(user),
        "token_type": "bearer",
    }


@router.post("/token", response_model=Token)
def token(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """OAuth2 password flow, for the interactive API docs."""
    user = user_service.login_user(db, form.username, form.password)
    return {"access_token": issue_token(user), "token_type": "bearer"}


@router.get("", response_model=List[UserSummary])
def list_users(db: Session = Depends(get_db)):
    return [user.to_dict() for user in user_service.list_users(db)]


@router.get("/me", response_model=UserSummary)
def me(user: User = Depends(get_current_user)):
    """Protected endpoint returning the user behind the bearer token."""
    return user.to_dict()


@router.get("/nearby", response_model=List[UserSummary])
def nearby_users(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(10.0, gt=0, le=20000),
    db: Session = Depends(get_db),
):
    """Users whose stored location is within ``radius_km`` of a point."""
    users = user_service.find_users_within_radius(db, latitude, longitude, radius_km)
    return [user.to_dict() for user in users]


@router.get("/pending-tasks", response_model=List[UserSummary])
def users_with_pending_tasks(db: Session = Depends(get_db)):
    return [user.to_dict() for user in user_service.find_users_with_pending_tasks(db)]


@router.get("/upcoming-follow-ups", response_model=List[UserSummary])
def users_with_upcoming_follow_ups(db: Session = Depends(get_db)):
    return [user.to_dict() for user in user_service.find_users_with_upcoming_follow_ups(db)]


@router.get("/{user_id}", response_model=UserSummary)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id).to_dict()


@router.put("/{user_id}/location", response_model=UserSummary)
def update_location(user_id: int, payload: LocationUpdate, db: Session = Depends(get_db)):
    return user_service.update_location(db, user_id, payload.latitude, payload.longitude).to_dict()


@router.put("/{user_id}/recommendations")
def update_recommendations(
    user_id: int,
    payload: RecommendationsUpdate,
    db: Session = Depends(get_db),
):
    user = user_service.update_recommendations(db, user_id, payload.recommendations)
    return {"message": "Recommendations updated", "user_id": user.id}
