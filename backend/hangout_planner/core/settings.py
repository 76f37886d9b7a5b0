from pathlib import Path
from typing import Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("memory", "database")


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Hangout Planner API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Generative AI
    GEMINI_API_KEY: str = ""  # required at startup, no shared default
    GEMINI_MODEL: str = "gemini-1.5-pro"
    AI_TEMPERATURE: float = 0.7
    AI_TIMEOUT_SECONDS: float = 20.0

    # Storage: "memory" is the non-durable development mode
    STORAGE_BACKEND: str = "memory"
    DB_URL: str = ""
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    # Connection Pool Settings
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    # Rate Limiting
    ENABLE_RATE_LIMITING: bool = True
    RATE_LIMIT_GENERATE: str = "10/minute"
    RATE_LIMIT_SAVE: str = "30/minute"
    RATE_LIMIT_READ: str = "60/minute"

    # Metrics
    ENABLE_METRICS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # CORS
    ALLOWED_ORIGINS: Union[list, str] = ["http://localhost:3000", "http://localhost:5000"]

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse ALLOWED_ORIGINS from comma-separated string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('STORAGE_BACKEND', mode='before')
    @classmethod
    def normalize_storage_backend(cls, v):
        v = (v or "memory").strip().lower()
        if v not in STORAGE_BACKENDS:
            raise ValueError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}")
        return v

    @field_validator('AI_TIMEOUT_SECONDS')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("AI_TIMEOUT_SECONDS must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parents[3] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
