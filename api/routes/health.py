from fastapi import APIRouter
from pydantic import BaseModel

from app.db import check_db_connection
from app.places_client import get_places_client
from app.scheduler import get_scheduler_status

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    services: dict


@router.get("/health", response_model=HealthResponse)
def health():
    """Check health of the database and configuration of external services."""
    database_ok = check_db_connection()
    services = {
        "database": database_ok,
        "places": get_places_client().is_configured,
        "recurrence_sweep": get_scheduler_status()["running"],
    }
    return HealthResponse(status="healthy" if database_ok else "degraded", services=services)
