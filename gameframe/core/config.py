"""
Application configuration using Pydantic Settings.
"""
import string
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "GameFrame"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    SECRET_KEY: str = "change-me-in-production"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./gameframe.db"
    REPOSITORY_BACKEND: str = "sql"  # "sql" or "memory"

    # Audio asset storage (S3)
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-1"
    AUDIO_BUCKET_NAME: str = "gameframe-audio"
    AUDIO_PREFIX: str = "audio"

    # Feedback
    TRANSCRIPT_PREVIEW_LIMIT: int = 3

    # Team access codes
    ACCESS_CODE_LENGTH: int = 8
    ACCESS_CODE_ALPHABET: str = string.ascii_letters + string.digits

    # URLs
    FRONTEND_URL: str = "http://localhost:3000"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
