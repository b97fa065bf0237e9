"""
Configuration management for DoseKeeper
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "DoseKeeper"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./dosekeeper.db"
    DATABASE_ECHO: bool = False

    # Blob storage for proof photos
    BLOB_STORAGE_DIR: str = "./data/blobs"
    PROOF_BUCKET: str = "medication-proofs"
    PUBLIC_BLOB_BASE_URL: str = "http://localhost:8000/storage"
    MAX_PROOF_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # Periodic re-evaluation
    MISSED_CHECK_INTERVAL_SECONDS: int = 60
    COUNTDOWN_INTERVAL_SECONDS: int = 1
    MONITOR_ENABLED: bool = True

    # Adherence statistics
    DEFAULT_STATS_WINDOW_DAYS: int = 30
    HISTORY_PERIODS: list[int] = [7, 30, 90]
    STATS_INCLUDE_TODAY: bool = True

    # Simulated caretaker notifications
    CARETAKER_EMAIL: str = "caretaker@email.com"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class SanitizeLimits:
    """Length bounds applied to user-entered medication text"""

    TEXT: int = 2000
    NAME: int = 200
    DOSAGE: int = 100
    NOTES: int = 1000


# Database table names
class TableNames:
    MEDICATIONS = "medications"
    MEDICATION_LOGS = "medication_logs"


settings = get_settings()
sanitize_limits = SanitizeLimits()
