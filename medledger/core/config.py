import logging
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "MedLedger"

    # Database
    DATABASE_URL: str = "sqlite:///:memory:"
    DATABASE_POOL_SIZE: Optional[int] = None
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_url(cls, v: str) -> str:
        # Async drivers are not supported by the synchronous unit of work
        if isinstance(v, str):
            if v.startswith("postgresql+asyncpg://"):
                return v.replace("postgresql+asyncpg://", "postgresql://", 1)
            if v.startswith("sqlite+aiosqlite://"):
                return v.replace("sqlite+aiosqlite://", "sqlite://", 1)
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')


def configure_logging(level: Optional[str] = None) -> None:
    """Basic logging setup for scripts embedding the registry"""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
