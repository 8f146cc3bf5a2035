"""
Volunteer accounts and their approval workflow.

Volunteers register unapproved and inactive; only an explicit approval makes
them able to log in. Approval and rejection overwrite the state in place.
"""
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.models import Volunteer
from app.user_service import validate_credentials
from app.logger import get_logger
from auth.security import hash_password, verify_password

logger = get_logger(__name__)


def _require(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


def register_volunteer(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    email: Optional[str],
    full_name: Optional[str],
    credentials: Optional[str] = None,
    specialization: Optional[str] = None,
    experience: Optional[int] = None,
    certificate_image: Optional[str] = None,
    id_proof_image: Optional[str] = None,
) -> Volunteer:
    """
    Register a volunteer application.

    Raises:
        ValidationError: a required field is missing or invalid
        ConflictError: username or email already registered
    """
    username = validate_credentials(username, password)
    email = _require(email, "Email")
    full_name = _require(full_name, "Full name")
    if "@" not in email:
        raise ValidationError("Email should be valid")
    if experience is not None and experience < 0:
        raise ValidationError("Experience cannot be negative")

    if db.query(Volunteer).filter(Volunteer.username == username).first():
        raise ConflictError("Username already exists")
    if db.query(Volunteer).filter(Volunteer.email == email).first():
        raise ConflictError("Email already exists")

    volunteer = Volunteer(
        username=username,
        password=hash_password(password),
        email=email,
        full_name=full_name,
        credentials=credentials,
        specialization=specialization,
        experience=experience,
        certificate_image=certificate_image,
        id_proof_image=id_proof_image,
        approved=False,
        active=False,
    )
    db.add(volunteer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already exists")
    db.refresh(volunteer)

    logger.info(f"Volunteer application received from '{username}' (id={volunteer.id})")
    return volunteer


def login_volunteer(db: Session, username: str, password: str) -> Volunteer:
    volunteer = db.query(Volunteer).filter(Volunteer.username == username).first()
    if (
        not volunteer
        or not verify_password(password, volunteer.password)
        or not volunteer.approved
        or not volunteer.active
    ):
        raise AuthenticationError("Invalid username or password, or account not approved yet")
    return volunteer


def get_volunteer(db: Session, volunteer_id: int) -> Volunteer:
    volunteer = db.query(Volunteer).filter(Volunteer.id == volunteer_id).first()
    if not volunteer:
        raise NotFoundError("Volunteer not found")
    return volunteer


def list_pending(db: Session) -> List[Volunteer]:
    """Applications not yet approved, newest first (rejected ones included)."""
    return (
        db.query(Volunteer)
        .filter(Volunteer.approved.is_(False))
        .order_by(Volunteer.created_at.desc(), Volunteer.id.desc())
        .all()
    )


def list_approved(db: Session) -> List[Volunteer]:
    return (
        db.query(Volunteer)
        .filter(Volunteer.approved.is_(True), Volunteer.active.is_(True))
        .order_by(Volunteer.id.asc())
        .all()
    )


def approve_volunteer(db: Session, volunteer_id: int) -> Volunteer:
    volunteer = get_volunteer(db, volunteer_id)
    volunteer.approved = True
    volunteer.active = True
    volunteer.rejection_reason = None
    db.commit()
    db.refresh(volunteer)
    logger.info(f"Volunteer {volunteer_id} approved")
    return volunteer


def reject_volunteer(db: Session, volunteer_id: int, reason: Optional[str]) -> Volunteer:
    volunteer = get_volunteer(db, volunteer_id)
    volunteer.approved = False
    volunteer.active = False
    volunteer.rejection_reason = reason
    db.commit()
    db.refresh(volunteer)
    logger.info(f"Volunteer {volunteer_id} rejected: {reason or 'no reason given'}")
    return volunteer


def delete_volunteer(db: Session, volunteer_id: int) -> None:
    volunteer = get_volunteer(db, volunteer_id)
    db.delete(volunteer)
    db.commit()
    logger.info(f"Volunteer {volunteer_id} deleted")
