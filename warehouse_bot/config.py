"""
Configuration management for Warehouse Bot.
Loads settings from environment variables with validation.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    base_dir: Path = Path(__file__).parent.parent

    # Telegram
    telegram_bot_token: str = Field(..., description="Telegram Bot API token")
    telegram_bot_username: str = Field(
        default="warehouse_bot", description="Telegram bot identity name"
    )

    # Warehouse service
    warehouse_service_url: str = Field(
        default="http://localhost:8080", description="Warehouse REST service base URL"
    )
    warehouse_timeout: float = Field(
        default=5.0, description="Connect/request timeout for warehouse calls, seconds"
    )

    # Conversation
    page_size: int = Field(
        default=5, ge=1, description="Products shown per page of a listing"
    )
    session_idle_timeout: float = Field(
        default=1800.0, description="Seconds before an idle chat session expires"
    )
    session_sweep_interval: float = Field(
        default=300.0, description="Seconds between expired-session sweeps"
    )

    # Debug
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def warehouse_base_url(self) -> str:
        """Warehouse service URL without a trailing slash."""
        return self.warehouse_service_url.rstrip("/")


# Global settings instance
settings = Settings()
