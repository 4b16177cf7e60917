# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token validation using python-jose.

Access tokens are issued by the platform auth service. This module
decodes and validates them; create_access_token() produces tokens with
the same claims for local tooling and tests.

Example:
    >>> from src.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(user_id="user-123", role="student")
    >>> claims = jwt_manager.decode_token(token)
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError

from src.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type.
        organization_id: Organization the user belongs to.
        role: User role (student, instructor, org_admin, admin).
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    type: Literal["access", "refresh"] = "access"
    organization_id: str | None = None
    role: str = "student"
    exp: int
    iat: int
    jti: str | None = None


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    def create_access_token(
        self,
        user_id: str,
        role: str = "student",
        organization_id: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            role: User role.
            organization_id: Organization identifier.
            expires_delta: Lifetime, defaults to the configured one.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + (expires_delta or timedelta(minutes=self._settings.access_token_expire_minutes))

        payload = {
            "sub": str(user_id),
            "type": "access",
            "organization_id": organization_id,
            "role": role,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(
        self,
        token: str,
        expected_type: Literal["access", "refresh"] | None = "access",
    ) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.
            expected_type: Expected token type, None to accept any.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or wrong type.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        try:
            claims = TokenPayload.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError(f"Invalid token claims: {e.error_count()} errors")

        if expected_type and claims.type != expected_type:
            raise InvalidTokenError(f"Expected {expected_type} token, got {claims.type}")

        return claims
