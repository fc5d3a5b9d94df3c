"""Authentication configuration for the Content Trust API.

Tokens are issued by the platform's identity service; this API only
verifies them.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class AuthSettings(BaseSettings):
    """Authentication configuration settings."""

    jwt_secret_key: str = Field(
        default="change-me", description="JWT signing secret key"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_issuer: str = Field(default="petwiki-identity", description="JWT issuer")
    jwt_audience: str = Field(default="contenttrust-api", description="JWT audience")
    access_cookie_name: str = Field(
        default="ct_at", description="Cookie carrying the access token"
    )

    model_config = SettingsConfigDict(env_prefix="AUTH_", case_sensitive=False)


def get_auth_settings() -> AuthSettings:
    """Get authentication settings from environment variables."""
    return AuthSettings()
