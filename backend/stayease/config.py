"""
Application configuration
Read once from environment variables (and .env) at process start
"""
from functools import lru_cache
from typing import List, Literal, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "StayEase"
    DEBUG: bool = False

    # Storage selection: memory | sql | mongodb
    DB_TYPE: Literal["memory", "sql", "mongodb"] = "memory"

    # Relational store
    DATABASE_URL: str = "sqlite:///./stayease.db"

    # Document store
    MONGODB_URI: str = "mongodb://localhost:27017/hotel_booking_app"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGODB_CONNECT_TIMEOUT_MS: int = 10000
    MONGODB_SOCKET_TIMEOUT_MS: int = 45000
    MONGODB_CONNECT_RETRIES: int = 3
    MONGODB_RETRY_DELAY_SECONDS: float = 3.0

    # What to do when the document store cannot be reached at startup
    STORAGE_FALLBACK_TO_MEMORY: bool = True

    # Sessions
    SESSION_SECRET: str = "stayease-session-secret-change-in-production"
    SESSION_COOKIE_NAME: str = "stayease.sid"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24
    SESSION_PRUNE_INTERVAL_SECONDS: int = 60 * 60 * 24
    SESSION_COOKIE_SECURE: bool = False

    # Bootstrap admin account (created at startup when a password is given)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_EMAIL: Optional[str] = None

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance"""
    return Settings()
