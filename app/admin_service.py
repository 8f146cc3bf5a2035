"""
Admin accounts. Admins are created through a bootstrap endpoint and log in
with username and password.
"""
from typing import Optional

from sqlalchemy.orm import Session

from app.exceptions import AuthenticationError, ConflictError
from app.models import Admin
from app.user_service import validate_credentials
from app.logger import get_logger
from auth.security import hash_password, verify_password

logger = get_logger(__name__)


def create_admin(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    full_name: Optional[str] = None,
    email: Optional[str] = None,
) -> Admin:
    username = validate_credentials(username, password)
    if db.query(Admin).filter(Admin.username == username).first():
        raise ConflictError("Username already exists")

    admin = Admin(
        username=username,
        password=hash_password(password),
        full_name=full_name,
        email=email,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Created admin '{username}' (id={admin.id})")
    return admin


def login_admin(db: Session, username: str, password: str) -> Admin:
    admin = db.query(Admin).filter(Admin.username == username).first()
    if not admin or not verify_password(password, admin.password):
        raise AuthenticationError("Invalid username or password")
    return admin
