"""
User accounts: registration, login, lookup and location queries.
"""
import math
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.models import Assessment, TodoTask, User
from app.logger import get_logger
from auth.security import hash_password, verify_password

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def validate_credentials(username: Optional[str], password: Optional[str]) -> str:
    """
    Check username/password presence and length.

    Returns:
        The stripped username

    Raises:
        ValidationError: on a missing, blank or out-of-range value
    """
    if username is None or not username.strip():
        raise ValidationError("Username is required")
    if password is None or not password.strip():
        raise ValidationError("Password is required")

    username = username.strip()
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    return username


def register_user(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    recommendations: Optional[str] = None,
) -> User:
    """
    Register a new user.

    Raises:
        ValidationError: missing or invalid username/password
        ConflictError: username already taken
    """
    username = validate_credentials(username, password)

    if db.query(User).filter(User.username == username).first():
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password=hash_password(password),
        latitude=latitude,
        longitude=longitude,
        recommendations=recommendations,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise ConflictError("Username already exists")
    db.refresh(user)

    logger.info(f"Registered user '{user.username}' (id={user.id})")
    return user


def login_user(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password):
        logger.info(f"Failed login for user '{username}'")
        raise AuthenticationError("Invalid username or password")
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id.asc()).all()


def update_location(db: Session, user_id: int, latitude: float, longitude: float) -> User:
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValidationError("Latitude must be within ±90 and longitude within ±180")

    user = get_user(db, user_id)
    user.latitude = latitude
    user.longitude = longitude
    db.commit()
    db.refresh(user)
    return user


def update_recommendations(db: Session, user_id: int, recommendations: Optional[str]) -> User:
    """Replace the user's stored recommendation text."""
    user = get_user(db, user_id)
    user.recommendations = recommendations
    db.commit()
    db.refresh(user)
    logger.info(f"Updated recommendations for user {user_id} ({len(recommendations or '')} chars)")
    return user


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def find_users_within_radius(
    db: Session,
    latitude: float,
    longitude: float,
    radius_km: float,
) -> List[User]:
    """
    Find users whose stored location lies within ``radius_km`` of a point.

    A latitude band is filtered in SQL; the exact haversine distance is
    checked in Python so the query works on any backend.
    """
    if radius_km <= 0:
        raise ValidationError("Radius must be positive")

    lat_delta = math.degrees(radius_km / EARTH_RADIUS_KM)
    candidates = (
        db.query(User)
        .filter(
            User.latitude.isnot(None),
            User.longitude.isnot(None),
            User.latitude.between(latitude - lat_delta, latitude + lat_delta),
        )
        .all()
    )
    return [
        user for user in candidates
        if haversine_km(latitude, longitude, user.latitude, user.longitude) < radius_km
    ]


def find_users_with_pending_tasks(db: Session) -> List[User]:
    return (
        db.query(User)
        .join(TodoTask, TodoTask.user_id == User.id)
        .filter(TodoTask.completed.is_(False))
        .distinct()
        .order_by(User.id.asc())
        .all()
    )


def find_users_with_upcoming_follow_ups(db: Session, today: Optional[date] = None) -> List[User]:
    """Users with at least one assessment whose follow-up date is today or later."""
    today = today or date.today()
    return (
        db.query(User)
        .join(Assessment, Assessment.user_id == User.id)
        .filter(Assessment.follow_up_date >= today)
        .distinct()
        .order_by(User.id.asc())
        .all()
    )
