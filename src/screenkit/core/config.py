"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Runtime settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SCREENKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Backend
    backend_url: str = Field(default="http://localhost:8000", description="Backend base URL")
    backend_timeout: float = Field(default=10.0, gt=0, description="Backend request timeout")
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Seconds before a half-open retry")
    auth_login_path: str = Field(default="/auth/login", description="Login endpoint path")
    auth_logout_path: str = Field(default="/auth/logout", description="Logout endpoint path")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Rendering
    max_render_depth: int = Field(default=64, gt=0, description="Deepest widget nesting rendered")
    partial_rerender: bool = Field(default=True, description="Reuse subtrees unaffected by a state change")

    # Actions
    result_key: str = Field(default="_result", min_length=1, description="ViewState key for effect payloads")

    # Documents
    max_document_size: int = Field(default=1024 * 1024, gt=0, description="Max screen document size (bytes)")
    max_json_depth: int = Field(default=128, gt=0, description="Max screen document nesting depth")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
