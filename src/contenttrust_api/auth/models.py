"""Authentication models for the Content Trust API."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from contenttrust_api.database.models.base import UserRole


class TokenClaims(BaseModel):
    """Claims of an access token issued by the identity service."""

    sub: UUID = Field(description="User UUID")
    role: UserRole = Field(default=UserRole.MEMBER, description="User role")
    iss: str = Field(description="Token issuer")
    aud: str = Field(description="Token audience")
    iat: int = Field(description="Issued at timestamp")
    exp: int = Field(description="Expiration timestamp")

    model_config = ConfigDict(use_enum_values=True)
