"""Settings module using pydantic-settings for configuration management."""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Service Configuration
    service_name: str = Field(default="pdf-service")
    environment: str = Field(default="development")
    port: int = Field(default=3000)
    host: str = Field(default="0.0.0.0")

    # Database Configuration (SQLite for users and documents)
    database_url: str = Field(default="sqlite+aiosqlite:///./pdf_service.db")

    # Authentication
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_hours: int = Field(default=24, ge=1)

    # Uploads and extraction
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1)  # 10 MiB
    extraction_timeout_seconds: float = Field(default=120.0, gt=0)
    extraction_workers: int = Field(default=4, ge=1)

    # Summarization (OpenAI-compatible chat API)
    openai_api_key: str = Field(default="")
    openai_model: str = Field(default="gpt-4o-mini")
    openai_base_url: Optional[str] = Field(default=None)
    openai_timeout_seconds: float = Field(default=60.0, gt=0)
    summary_max_input_chars: int = Field(default=12000, ge=1)

    # HTTP
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
