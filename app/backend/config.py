"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini (reached through its OpenAI-compatible endpoint)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "secret_key_generative_ai"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    image_model: str = "gemini-1.5-flash"
    text_model: str = "gemini-1.5-pro"
    fallback_model: str = "gemini-1.5-flash"

    # Uploads
    upload_dir: Path = Path("./uploads")
    max_upload_size: int = 5 * 1024 * 1024
    max_upload_files: int = 5
    allowed_mime_types: list[str] = [
        "image/png",
        "image/jpg",
        "image/jpeg",
        "image/svg+xml",
        "application/pdf",
    ]

    # Processing
    max_image_size: int = 1024

    cors_origins: list[str] = ["*"]
    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the backend directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
