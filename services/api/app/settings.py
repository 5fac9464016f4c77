"""Application settings via Pydantic Settings."""

from functools import lru_cache
import json
from typing import Annotated
from urllib.parse import parse_qs, urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _asyncpg_connect_args_from_url(database_url: str) -> dict[str, object]:
    """
    Compute asyncpg connect_args based on DATABASE_URL.

    Private-network Postgres hosts (*.internal) reject SSL negotiation, so SSL
    is disabled there. asyncpg does not accept libpq's ``sslmode`` query
    parameter, so a requested sslmode is translated into connect args.
    """
    parsed = urlparse(database_url)
    host = parsed.hostname or ""
    if host.endswith(".internal"):
        return {"ssl": False, "timeout": 20}
    sslmode = parse_qs(parsed.query).get("sslmode", [""])[0]
    if sslmode in ("require", "verify-ca", "verify-full"):
        return {"ssl": "require"}
    return {}


def _parse_list(v: object) -> list[str]:
    """
    Accept either:
    - JSON array string: '["a","b"]'
    - Comma-separated string: "a,b"
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
                # Fall back to comma split if env var isn't valid JSON.
                parsed = s.split(",")
            if isinstance(parsed, list):
                return [str(x).strip() for x in parsed if str(x).strip()]
            return [str(parsed).strip()]
        return [part.strip() for part in s.split(",") if part.strip()]
    return [str(v).strip()] if str(v).strip() else []


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
    app_name: str = "InstantProof API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Database (PostgreSQL). Empty means "no store": reviews/stats fall back
    # to bundled data and mention persistence is skipped.
    database_url: str = Field(
        default="",
        validation_alias=AliasChoices("DATABASE_URL", "POSTGRES_URL", "POSTGRES_URL_NON_POOLING"),
    )

    @property
    def has_database(self) -> bool:
        return bool(self.database_url.strip())

    @property
    def async_database_url(self) -> str:
        """Get database URL with asyncpg driver.

        Hosted Postgres hands out postgres:// or postgresql:// URLs; async
        SQLAlchemy needs postgresql+asyncpg://.
        """
        url = self.database_url.strip()
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url.split("?", 1)[0]

    @property
    def asyncpg_connect_args(self) -> dict[str, object]:
        """Extra connect args for asyncpg (SSL quirks per host)."""
        return _asyncpg_connect_args_from_url(self.database_url.strip())

    # Redis (optional; only used for the cross-process schema-init lock)
    redis_url: str = ""

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias=AliasChoices("CORS_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: object) -> list[str]:
        return _parse_list(v)

    # Public widget host (used when the request carries no Host header)
    public_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("PUBLIC_BASE_URL"),
    )

    # External mention sources
    gnews_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GNEWS_API_KEY"),
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("HTTP_TIMEOUT_SECONDS"),
        gt=0,
        le=60,
    )
    mentions_user_agent: str = Field(
        default="instantproof-widget",
        validation_alias=AliasChoices("MENTIONS_USER_AGENT"),
    )
    reddit_subreddits: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["entrepreneur", "smallbusiness", "saas"],
        validation_alias=AliasChoices("REDDIT_SUBREDDITS"),
    )

    @field_validator("reddit_subreddits", mode="before")
    @classmethod
    def _parse_subreddits(cls, v: object) -> list[str]:
        return _parse_list(v)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
