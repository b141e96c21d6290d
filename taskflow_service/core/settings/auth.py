"""Authentication service settings."""

from __future__ import annotations

from pydantic import AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """External authentication service configuration.

    Bearer tokens presented by callers are validated by calling the auth
    service's user endpoint, which returns the owning user on success.

    Environment variables use AUTH_ prefix.
    Example: AUTH_SERVICE_URL=https://project.supabase.co
    """

    service_url: AnyHttpUrl | None = Field(
        default=None,
        description="Base URL of the authentication service",
    )
    token_validation_endpoint: str = Field(
        default="/auth/v1/user",
        pattern=r"^/.*$",
        description="Path that resolves a bearer token to its user",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key sent as the 'apikey' header, if the auth service requires one",
    )
    request_timeout: float = Field(
        default=5.0, ge=0.5, le=60.0, description="Auth request timeout in seconds",
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    # Development mode
    dev_mode: bool = Field(
        default=False,
        description="Accept any bearer token and authenticate as dev_mock_user",
    )
    dev_mock_user: str = Field(
        default="00000000-0000-4000-8000-000000000001",
        description="User id returned in development mode",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if an auth service URL is available."""
        return self.service_url is not None

    @property
    def validation_url(self) -> str:
        """Full URL of the token validation endpoint."""
        if self.service_url is None:
            msg = "AUTH_SERVICE_URL is not configured"
            raise ValueError(msg)
        return str(self.service_url).rstrip("/") + self.token_validation_endpoint
