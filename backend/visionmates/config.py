from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VISIONMATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "VisionMates API"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ]
    )
    database_url: str = "sqlite+aiosqlite:///./visionmates.db"

    allowed_email_domains: list[str] = Field(
        default_factory=lambda: ["aoyama.jp", "aoyama.ac.jp"],
        description="Email domains (and their subdomains) allowed to use the API",
    )
    enforce_email_domain: bool = True

    better_auth_secret: str = Field(
        default="your-secret-key-change-in-production",
        description="Secret key for better-auth JWT verification",
    )
    better_auth_url: str = Field(
        default="http://localhost:3000",
        description="Better-auth base URL",
    )
    better_auth_internal_url: str | None = Field(
        default=None,
        description="Internal URL for contacting better-auth from backend (optional)",
    )

    discover_page_size: int = 12
    discover_max_page_size: int = 100
    liked_page_size: int = 12
    message_max_length: int = 1000
    conversation_message_limit: int = 50


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
