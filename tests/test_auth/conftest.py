"""Fixtures for authentication tests."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from unittest.mock import patch

import jwt
import pytest

from contenttrust_api.config.auth import AuthSettings

TEST_SECRET = "test-secret-key-for-contenttrust-api-tests"


@pytest.fixture
def auth_settings():
    """Auth settings with a fixed test secret."""
    return AuthSettings(jwt_secret_key=TEST_SECRET)


@pytest.fixture
def jwt_service(auth_settings):
    """JWTService bound to the test settings."""
    from contenttrust_api.auth.jwt_service import JWTService

    with patch(
        "contenttrust_api.auth.jwt_service.get_auth_settings",
        return_value=auth_settings,
    ):
        yield JWTService()


@pytest.fixture
def make_token(auth_settings):
    """Encode an access token the way the identity service issues them."""

    def _make(
        sub,
        role="member",
        expires_in=timedelta(minutes=15),
        secret=None,
        audience=None,
        issuer=None,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(sub),
            "role": role,
            "iss": issuer or auth_settings.jwt_issuer,
            "aud": audience or auth_settings.jwt_audience,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        return jwt.encode(
            payload,
            secret or auth_settings.jwt_secret_key,
            algorithm=auth_settings.jwt_algorithm,
        )

    return _make
