"""
Application settings, read from the environment and an optional .env file.
"""
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import Field

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Every field can be overridden by the upper-cased environment variable."""

    # Database
    database_url: str = Field(
        default="sqlite:///./mindease.db",
        description="SQLAlchemy connection URL (SQLite or PostgreSQL)"
    )
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)

    # Authentication
    secret_key: str = Field(default="CHANGE_THIS_SECRET")
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)
    password_hash_scheme: str = Field(
        default="bcrypt",
        description="passlib scheme used for stored password hashes"
    )

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )

    # Places (nearby hospitals) Configuration
    places_api_key: str = Field(default="")
    places_api_base: str = Field(
        default="https://maps.googleapis.com/maps/api/place",
        description="Google Places web service base URL"
    )
    places_radius_m: int = Field(default=5000, description="Search radius in metres")
    places_type: str = Field(default="hospital")
    places_keyword: str = Field(default="mental health")
    places_timeout: float = Field(default=10.0)

    # Recurrence sweep (off: recurring tasks are refreshed when listed)
    recurrence_sweep_enabled: bool = Field(default=False)
    recurrence_sweep_interval_minutes: int = Field(default=60)

    # Runtime
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
