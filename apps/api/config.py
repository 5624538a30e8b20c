"""
Application configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./lesson_report.db"

    # Redis
    REDIS_URL: str = "redis://localhost:6379"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 18080

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Peers whose X-Forwarded-For header is honoured when rate limiting
    TRUSTED_PROXIES: List[str] = []

    # Security
    JWT_SECRET: str = "change-this-jwt-secret-min-32-bytes"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 120
    AUTO_CREATE_DB_SCHEMA: bool = True

    # Bootstrap account (seeded on startup when username is set)
    BOOTSTRAP_USERNAME: str = ""
    BOOTSTRAP_PASSWORD: str = ""
    BOOTSTRAP_INSTRUCTOR_EMAIL: str = "owner@lessonreport.local"
    BOOTSTRAP_INSTRUCTOR_NAME: str = "Owner"

    # Share links
    SHARE_BASE_URL: str = "http://localhost:5173/share"
    SHARE_DEFAULT_EXPIRE_HOURS: int = 72
    SHARE_MAX_EXPIRE_HOURS: int = 720

    # Photo uploads
    UPLOAD_DIR: str = "./uploads"
    MAX_PHOTO_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Homework reminders
    HOMEWORK_REMINDER_ENABLED: bool = True
    HOMEWORK_REMINDER_POLL_SECONDS: int = 60
    HOMEWORK_REMINDER_WEBHOOK_URL: str = ""
    HOMEWORK_REMINDER_WEBHOOK_TIMEOUT_SECONDS: float = 5.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()


def validate_security_settings() -> None:
    """Fail fast when insecure default secrets are still configured."""
    insecure_values = {
        "",
        "change-this-jwt-secret-min-32-bytes",
        "change_me_in_production",
    }
    jwt_secret = (settings.JWT_SECRET or "").strip()

    if jwt_secret in insecure_values or len(jwt_secret.encode("utf-8")) < 32:
        raise ValueError("JWT_SECRET is insecure. Configure a strong non-default secret (>=32 bytes).")
    if settings.BOOTSTRAP_USERNAME and len(settings.BOOTSTRAP_PASSWORD or "") < 8:
        raise ValueError("BOOTSTRAP_PASSWORD must be at least 8 characters when BOOTSTRAP_USERNAME is set.")
