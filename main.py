from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import admins, assessments, health, hospitals, todos, users, volunteers
from app.config import settings
from app.db import init_db
from app.exceptions import MindEaseError
from app.logger import get_logger, setup_logging
from app.scheduler import start_scheduler, stop_scheduler

setup_logging(level=settings.log_level, log_file=settings.log_file)
logger = get_logger("main")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger.info("Starting MindEase backend...")

    init_db()
    logger.info("Database tables initialized")

    if settings.recurrence_sweep_enabled:
        start_scheduler()

    yield

    logger.info("Shutting down MindEase backend...")
    stop_scheduler()
    logger.info("Application shutdown complete")


async def mindease_error_handler(request: Request, exc: MindEaseError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="MindEase Backend",
        description="Accounts, self-assessments, wellness to-do tasks and nearby mental-health hospitals",
        version="1.0.0",
        lifespan=app_lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(MindEaseError, mindease_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(volunteers.router)
    app.include_router(admins.router)
    app.include_router(assessments.router)
    app.include_router(todos.router)
    app.include_router(hospitals.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
