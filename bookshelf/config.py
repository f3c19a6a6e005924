"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOKSHELF_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Bookshelf"
    app_version: str = "0.2.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./bookshelf.db")
    db_echo: bool = False

    # Library
    seed_on_startup: bool = True
    auto_finish_on_complete: bool = False  # move to "Read" when pages hit 100%

    # Backup
    backup_version: int = 1
    export_filename_prefix: str = "openbook_library"

    # CORS
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
