# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Storage: "json" keeps one file per collection, "sql" uses DATABASE_URL
    STORAGE_BACKEND: str = "json"
    DATA_DIR: str = "./data"
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Password reset tokens
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    RESET_TOKEN_EXPIRE_MINUTES: int = 15

    OTP_TTL_MINUTES: int = 10
    OTP_LENGTH: int = 6
    MIN_PASSWORD_LENGTH: int = 6

    DELIVERY_DAYS: int = 6
    AUDIT_LOG_LIMIT: int = 1000

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    PING_MESSAGE: str = "ping"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
