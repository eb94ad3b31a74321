"""
CrisisAI Responder - Configuration Management

Centralized configuration using Pydantic Settings.
Environment-specific values are loaded from environment variables.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Hierarchy (highest to lowest priority):
    1. Environment variables
    2. .env file
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_env: str = "development"
    app_debug: bool = True
    app_log_level: str = "INFO"
    log_json: bool = False  # JSON log lines (production) vs human-readable

    # --- Service Identity (reported by /api/health) ---
    service_name: str = "CrisisAI Multi-Modal Emergency Responder"
    service_version: str = "1.0.0"

    # --- Server ---
    backend_host: str = "0.0.0.0"
    backend_port: int = 3000

    # --- Uploads ---
    max_upload_files: int = 5
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB per file
    allowed_image_types: str = "image/jpeg,image/png,image/gif,image/webp"
    persist_uploads: bool = False  # Images are only counted unless enabled
    upload_dir: str = "./uploads"

    # --- Session Log ---
    session_log_max_entries: int = 0  # 0 = unbounded
    anonymize_logs: bool = False       # If True, log lines omit message text
    log_message_preview_chars: int = 80

    # --- Security ---
    allowed_origins: str = "*"

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated origins into list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def allowed_image_types_list(self) -> List[str]:
        return [t.strip().lower() for t in self.allowed_image_types.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.

    Routes read the app's settings from ``app.state``; this is the default
    used by the app factory.
    """
    return Settings()
