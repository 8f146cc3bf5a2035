from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import admin_service
from app.db import get_db
from auth.jwt_handler import create_access_token
from schemas.admins import AdminCreate
from schemas.users import LoginRequest

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    if payload.username is None or payload.password is None:
        raise HTTPException(status_code=400, detail="Username and password are required")

    admin = admin_service.login_admin(db, payload.username, payload.password)
    return {
        "message": "Login successful",
        "admin": {**admin.to_dict(), "role": "ADMIN"},
        "access_token": create_access_token({"sub": str(admin.id), "role": "ADMIN"}),
        "token_type": "bearer",
    }


@router.post("/create")
def create(payload: AdminCreate, db: Session = Depends(get_db)):
    """Bootstrap an admin account."""
    admin = admin_service.create_admin(db, **payload.model_dump())
    return {
        "message": "Admin created successfully",
        "admin": {"id": admin.id, "username": admin.username},
    }
