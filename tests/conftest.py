# tests/conftest.py

import os
import tempfile
from pathlib import Path

import pytest

# Settings are read once at import time, so the test environment has to be
# in place before any app module is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="mindease-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["PASSWORD_HASH_SCHEME"] = "pbkdf2_sha256"
os.environ["PLACES_API_KEY"] = ""
os.environ["RECURRENCE_SWEEP_ENABLED"] = "false"
os.environ["APP_ENV"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from app.db import SessionLocal, engine  # noqa: E402
from app.models import Base  # noqa: E402
from app.user_service import register_user  # noqa: E402


@pytest.fixture()
def db():
    """A session on freshly created tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user(db):
    return register_user(db, "alice", "secret123")


@pytest.fixture()
def client(db):
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
