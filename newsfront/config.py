"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsfront.services.env_validation import ENV_SPEC, is_production


class Settings(BaseSettings):
    """NewsFront application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Content source
    wpgraphql_endpoint: str | None = None
    revalidate_secret: str | None = None
    graphql_timeout_seconds: float = Field(default=15.0, gt=0)

    # Site metadata
    site_url: str | None = None
    site_title: str | None = None
    site_description: str | None = None
    site_name: str | None = None
    site_copyright: str | None = None

    # Analytics (public)
    public_ga_id: str | None = None
    public_ga_debug: str | None = None

    # Core
    environment: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    # Response hardening
    allowed_redirect_origins: list[str] = Field(default_factory=list)

    @property
    def is_production(self) -> bool:
        return is_production(self.environment)

    def env_mapping(self) -> dict[str, str | None]:
        """Return the gated variables keyed by their environment names."""
        return {name: getattr(self, name.lower(), None) for name in ENV_SPEC}

    def redirect_origins(self) -> list[str]:
        """Origins a redirect may target: the configured list, else the site itself."""
        if self.allowed_redirect_origins:
            return list(self.allowed_redirect_origins)
        return [self.site_url] if self.site_url else []
