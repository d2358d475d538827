"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from datetime import timedelta
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROVIDER_ENDPOINTS = (
    "https://nominatim.openstreetmap.org/reverse?format=json&zoom=18&addressdetails=1&lat={lat}&lon={lon}"
    "|https://api.bigdatacloud.net/data/reverse-geocode-client?latitude={lat}&longitude={lon}&localityLanguage=en"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cache
    cache_ttl_minutes: int = Field(
        default=30,
        description="Minutes a provider response stays in the cache",
        gt=0,
    )
    cache_key_precision: int = Field(
        default=6,
        description="Decimal places kept when normalising coordinates into cache keys",
        ge=0,
        le=10,
    )

    # Providers
    provider_endpoints: str = Field(
        default=DEFAULT_PROVIDER_ENDPOINTS,
        description="Pipe-separated reverse geocoding URL templates with {lat} and {lon} placeholders",
    )
    provider_timeout: float = Field(
        default=10.0,
        description="Per-call provider request timeout in seconds",
        gt=0,
    )
    provider_user_agent: str = Field(
        default="geocode-api/0.1",
        description="User-Agent header sent to providers",
    )

    @field_validator("provider_endpoints")
    @classmethod
    def validate_provider_endpoints(cls, v: str) -> str:
        templates = [t.strip() for t in v.split("|") if t.strip()]
        if not templates:
            msg = "provider_endpoints must contain at least one URL template"
            raise ValueError(msg)
        for template in templates:
            if "{lat}" not in template or "{lon}" not in template:
                msg = f"Provider endpoint must contain {{lat}} and {{lon}} placeholders: {template}"
                raise ValueError(msg)
            if urlsplit(template).scheme not in ("http", "https"):
                msg = f"Provider endpoint must use http or https: {template}"
                raise ValueError(msg)
        return v

    @property
    def provider_endpoint_list(self) -> list[str]:
        """Parse the endpoint string into a list of URL templates."""
        return [t.strip() for t in self.provider_endpoints.split("|") if t.strip()]

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_ttl_minutes)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging, including per-key cache decisions",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
