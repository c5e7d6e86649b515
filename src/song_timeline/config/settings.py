"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. Nested sections are frozen after
initialization.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.game.value_objects import GameRules, TurnPolicy
from ..domain.shared.messages import ErrorMessages


class GameSettings(BaseModel):
    """Round and auction rules plus the initial catalog location."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    turn_policy: TurnPolicy = TurnPolicy.FIRST_JOINED
    max_reservations_per_player: int | None = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("max_reservations_per_player", "max_reservations"),
    )
    turn_player_may_interject: bool = False
    starting_tokens: int = Field(default=0, ge=0, le=100)
    shuffle_seed: int | None = Field(
        default=None, validation_alias=AliasChoices("shuffle_seed", "seed")
    )
    catalog_path: Path = Field(
        default=Path("data/catalog.json"),
        validation_alias=AliasChoices("catalog_path", "catalog"),
    )

    def to_rules(self) -> GameRules:
        return GameRules(
            turn_policy=self.turn_policy,
            max_reservations_per_player=self.max_reservations_per_player,
            turn_player_may_interject=self.turn_player_may_interject,
            starting_tokens=self.starting_tokens,
        )


class SpotifySettings(BaseModel):
    """Spotify Web API configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "spotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    api_base_url: str = "https://api.spotify.com/v1"
    accounts_url: str = "https://accounts.spotify.com"
    market: str = Field(default="SE", min_length=2, max_length=2)
    request_timeout_s: float = Field(
        default=10.0,
        gt=0.0,
        le=60.0,
        validation_alias=AliasChoices("request_timeout_s", "timeout"),
    )

    @field_validator("api_base_url", "accounts_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Spotify URLs must start with https:// or http://")
        return v.rstrip("/")

    @field_validator("market")
    @classmethod
    def validate_market(cls, v: str) -> str:
        return v.upper()

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - GAME__TURN_POLICY, GAME__SHUFFLE_SEED, GAME__CATALOG_PATH, etc.
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET, SPOTIFY__MARKET, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    game: GameSettings = Field(default_factory=GameSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
