"""Application configuration with environment validation.

Usage:
    from recordboard.config import get_settings

    settings = get_settings()
    print(settings.supabase_url)

Settings are read from environment variables, falling back to a `.env` file
in the working directory or the project root.
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """Find .env file, checking the current dir and then the project root."""
    if Path(".env").exists():
        return Path(".env")
    # config.py -> recordboard -> src -> project_root
    env_file = Path(__file__).resolve().parent.parent.parent / ".env"
    if env_file.exists():
        return env_file
    return None


class Environment(StrEnum):
    """Application environment."""

    LOCAL = "local"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LogFormat(StrEnum):
    """Log output format."""

    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Environment.LOCAL

    # Supabase (data store + auth)
    supabase_url: str = Field(description="Supabase project URL")
    supabase_key: SecretStr = Field(description="Supabase anon/public key")
    supabase_service_role_key: SecretStr | None = Field(
        default=None, description="Service role key (bypasses RLS, for CLI/admin use)"
    )

    # Public read API is embeddable on club websites
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # CSV import feedback
    max_csv_errors_shown: int = Field(default=5, ge=1)

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Log output format")

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def admin_key(self) -> str:
        """Service role key if configured, otherwise the anon key."""
        key = self.supabase_service_role_key or self.supabase_key
        return key.get_secret_value()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    To reload: get_settings.cache_clear()
    """
    return Settings()
