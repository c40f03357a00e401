"""Core application configuration and settings.

Handles environment variables, CORS origins, rate limiting and event sink
selection.
"""
import json
import os
from pathlib import Path
from typing import Annotated, Any, Optional
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


# Load environment variables
ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT / ".env")
load_dotenv()

DEV_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
SINK_BACKENDS = ("log", "memory", "redis")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    environment: str = Field(
        default_factory=lambda: (
            os.getenv("ENVIRONMENT")
            or os.getenv("NODE_ENV")
            or "development"
        ),
        alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    static_dir: Path = Field(default=ROOT / "static", alias="STATIC_DIR")

    # CORS (only consulted in production; development origins are fixed).
    # CORS_ORIGINS is a comma-separated list or a JSON array.
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["https://yourdomain.com"],
        alias="CORS_ORIGINS"
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_max_requests: int = Field(default=100, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_seconds: int = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")

    # Analytics / lead sink
    event_sink: str = Field(default="log", alias="EVENT_SINK")
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    redis_db: int = Field(default=0, alias="REDIS_DB")

    # Streamlit front end
    api_base: str = Field(default="http://127.0.0.1:3000", alias="API_BASE")

    class Config:
        case_sensitive = False
        env_file = ".env"
        populate_by_name = True
        extra = "ignore"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        value = value.strip()
        if value.startswith("["):
            return json.loads(value)
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins for the current environment."""
        if self.is_production:
            return list(self.cors_origins)
        return list(DEV_CORS_ORIGINS)

    def validate_required_settings(self):
        """Validate that settings are usable."""
        if self.event_sink not in SINK_BACKENDS:
            raise ValueError(
                f"EVENT_SINK must be one of {', '.join(SINK_BACKENDS)} "
                f"(got '{self.event_sink}')."
            )
        if self.rate_limit_max_requests < 1 or self.rate_limit_window_seconds < 1:
            raise ValueError(
                "RATE_LIMIT_MAX_REQUESTS and RATE_LIMIT_WINDOW_SECONDS must be positive."
            )
        if self.is_production and not self.cors_origins:
            raise ValueError("CORS_ORIGINS must list at least one origin in production.")


# Global settings instance
settings = Settings()


# Validate settings on module import (only in non-test environments)
if settings.environment != "test":
    try:
        settings.validate_required_settings()
    except ValueError as e:
        print(f"Configuration Error: {e}")
        # Don't raise in development to allow partial setup
        if settings.is_production:
            raise
