"""
hiprompt Settings and Configuration.

Pydantic settings with environment variable support:
- Nested settings with env_prefix for organization
- Environment variables use double underscore delimiter (ENV__NESTED__VAR)
- Missing gateway credentials are detected, never replaced by working defaults
- Global settings singleton

Example .env file:
    # Supabase gateway
    SUPABASE__URL=https://abcdefgh.supabase.co
    SUPABASE__ANON_KEY=eyJhbGciOi...
    SUPABASE__TIMEOUT=30
    SUPABASE__SESSION_FILE=~/.config/hiprompt/session.json

    # Like counter maintenance (increment or recount)
    LIKES__COUNTER_STRATEGY=increment

    # Environment
    ENVIRONMENT=development
    LOG_LEVEL=WARNING

The variable names used by the web build (VITE_SUPABASE_URL,
VITE_SUPABASE_ANON_KEY) are accepted as well.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_URL = "https://placeholder.supabase.co"
PLACEHOLDER_KEY = "placeholder-key"


class SupabaseSettings(BaseSettings):
    """
    Supabase gateway settings (auth + PostgREST).

    Environment variables:
        SUPABASE__URL - Project base URL (or VITE_SUPABASE_URL)
        SUPABASE__ANON_KEY - Public anon API key (or VITE_SUPABASE_ANON_KEY)
        SUPABASE__TIMEOUT - HTTP timeout in seconds
        SUPABASE__SESSION_FILE - Where the signed-in session is persisted
        SUPABASE__REFRESH_MARGIN - Refresh tokens expiring within this many seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE__URL", "VITE_SUPABASE_URL"),
        description="Supabase project URL (https://<ref>.supabase.co)",
    )

    anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE__ANON_KEY", "VITE_SUPABASE_ANON_KEY"),
        description="Supabase anon (public) API key",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for gateway calls",
    )

    session_file: Path = Field(
        default=Path("~/.config/hiprompt/session.json"),
        description="JSON file holding the persisted auth session",
    )

    refresh_margin: int = Field(
        default=60,
        ge=0,
        description="Refresh the access token when it expires within this many seconds",
    )

    @property
    def url_configured(self) -> bool:
        return bool(self.url) and self.url != PLACEHOLDER_URL

    @property
    def anon_key_configured(self) -> bool:
        return bool(self.anon_key) and self.anon_key != PLACEHOLDER_KEY

    def is_configured(self) -> bool:
        """True when both the URL and the anon key are real values."""
        return self.url_configured and self.anon_key_configured

    def missing_fields(self) -> list[str]:
        """Names of the environment variables that still need a value."""
        missing = []
        if not self.url_configured:
            missing.append("SUPABASE__URL")
        if not self.anon_key_configured:
            missing.append("SUPABASE__ANON_KEY")
        return missing


class LikesSettings(BaseSettings):
    """
    Like counter settings.

    The likes_count column is denormalized. "increment" adjusts it by one on
    every toggle (two non-atomic calls), "recount" rewrites it from the number
    of prompt_likes rows after every toggle.

    Environment variables:
        LIKES__COUNTER_STRATEGY - increment or recount
    """

    model_config = SettingsConfigDict(
        env_prefix="LIKES__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    counter_strategy: Literal["increment", "recount"] = Field(
        default="increment",
        description="How likes_count is maintained after a like toggle",
    )


class Settings(BaseSettings):
    """
    Global application settings.

    Aggregates all nested settings groups with environment variable support.

    Environment variables:
        ENVIRONMENT - Environment (development, staging, production)
        LOG_LEVEL - Default loguru level for the CLI
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # Nested settings groups
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    likes: LikesSettings = Field(default_factory=LikesSettings)


# Global settings singleton
settings = Settings()
