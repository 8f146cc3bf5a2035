"""
Engine, sessions and schema setup.

SQLite (the default) and PostgreSQL are both supported. On SQLite, foreign
keys are switched on per connection so deleting a user removes their
assessments and tasks.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool

from app.config import settings
from app.logger import get_logger

logger = get_logger(__name__)

IS_SQLITE = settings.database_url.startswith("sqlite")


def engine_options() -> Dict[str, Any]:
    """Keyword arguments for ``create_engine`` for the configured backend."""
    if IS_SQLITE:
        # Sessions are handed across FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}, "echo": settings.debug}
    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "echo": settings.debug,
    }


engine = create_engine(settings.database_url, **engine_options())

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@event.listens_for(engine, "connect")
def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    if not IS_SQLITE:
        return
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per request. Services commit their own
    work; anything left pending when the request fails is rolled back.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session scope for code outside a request, such as the recurrence sweep."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Session rolled back: {e}")
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables."""
    from app.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info(f"Schema ready on {engine.url.get_backend_name()}")


def check_db_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True
