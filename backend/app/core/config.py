"""
Application Configuration
Loads settings from environment variables using Pydantic Settings.
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Application
    APP_NAME: str = "Comanda"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    UVICORN_PORT: int = 8000

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    AUTH_RATE_LIMIT_PER_MINUTE: int = 10

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 0
    DATABASE_SYNC_POOL_SIZE: int = 5
    DATABASE_ECHO: bool = False

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TASK_SOFT_TIME_LIMIT: int = 270   # 4.5 min
    CELERY_TASK_TIME_LIMIT: int = 300        # 5 min
    HEALTH_CHECK_MINUTES: int = 5

    # Celery Beat: horarios das tarefas diarias
    SCHEDULER_TIMEZONE: str = "America/Sao_Paulo"
    TRIAL_SWEEP_HOUR: int = 0
    TRIAL_SWEEP_MINUTE: int = 0
    TRIAL_REMINDER_HOUR: int = 10
    TRIAL_REMINDER_MINUTE: int = 0

    # Trial
    DEFAULT_TRIAL_DAYS: int = 7

    # Object storage (S3-compatible)
    S3_ENDPOINT: str = ""
    S3_PUBLIC_URL: str = ""
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_REGION: str = "auto"
    S3_BUCKET: str = ""

    # Uploads
    MAX_IMAGE_SIZE_MB: int = 5
    MAX_LOGO_SIZE_MB: int = 2
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/jpg,image/png,image/gif,image/webp"

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1"]

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> List[str]:
        """Parse allowed image MIME types from comma-separated string"""
        return [mime.strip() for mime in self.ALLOWED_IMAGE_TYPES.split(",")]

    @property
    def database_url_sync(self) -> str:
        """URL sincrona derivada da async para uso no Celery worker."""
        return (
            self.DATABASE_URL
            .replace("postgresql+asyncpg://", "postgresql+psycopg2://")
            .replace("sqlite+aiosqlite://", "sqlite://")
        )


# Singleton instance
settings = Settings()
