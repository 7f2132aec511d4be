"""Application settings via Pydantic Settings."""

from functools import lru_cache
import json
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = "Snackify API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        validation_alias=AliasChoices("CORS_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: object) -> list[str]:
        """
        Accept either:
        - JSON array string: '["https://a.com","http://localhost:3000"]'
        - Comma-separated string: "https://a.com,http://localhost:3000"
        - Already-parsed list[str]
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError:
                    parsed = s.split(",")
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
                return [str(parsed).strip()]
            return [part.strip() for part in s.split(",") if part.strip()]
        return [str(v).strip()] if str(v).strip() else []

    # Storage medium for ratings and comments
    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="file",
        validation_alias=AliasChoices("SNACKIFY_STORAGE", "STORAGE_BACKEND"),
    )
    storage_path: str = Field(
        default=".snackify/store.json",
        validation_alias=AliasChoices("SNACKIFY_STORAGE_PATH", "STORAGE_PATH"),
        description="JSON document used by the file backend",
    )

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Storage keys (same names the browser client used in localStorage)
    ratings_key: str = "snackifyRatings"
    comments_key: str = "snackifyComments"

    # Ratings
    strict_ratings: bool = Field(
        default=True,
        validation_alias=AliasChoices("STRICT_RATINGS"),
        description="Reject rating values that fail integer coercion instead of storing NaN",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
