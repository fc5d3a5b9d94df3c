"""JWT verification for the Content Trust API."""

import jwt

from jwt import DecodeError
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError
from pydantic import ValidationError

from contenttrust_api.auth.models import TokenClaims
from contenttrust_api.config.auth import get_auth_settings


class JWTService:
    """Verifies access tokens; issuing them belongs to the identity service."""

    def __init__(self):
        self._settings = get_auth_settings()

    def decode_token(self, token: str) -> TokenClaims | None:
        """Decode and validate JWT token."""
        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm],
                audience=self._settings.jwt_audience,
                issuer=self._settings.jwt_issuer,
            )
            return TokenClaims(**claims)
        except (DecodeError, ExpiredSignatureError, InvalidTokenError, ValidationError):
            return None
