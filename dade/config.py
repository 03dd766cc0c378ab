from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = "sqlite:///file.db"
    DB_ECHO: bool = False  # Echo emitted SQL through the engine logger

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_TRACE_ID: Optional[str] = None  # Default trace id for records not bound to a unit of work

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
