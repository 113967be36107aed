# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session token decoding.

Session tokens are issued by the external identity provider. This module
only verifies them and extracts the caller's identity claims, using
python-jose.

Example:
    >>> decoder = SessionTokenDecoder(get_settings().auth)
    >>> claims = decoder.decode_token(token)
    >>> claims.sub
    'a1b2c3'
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from intervention_tracker.core.config.settings import AuthSettings
from intervention_tracker.models.common import SessionClaims

logger = logging.getLogger(__name__)


class SessionTokenError(Exception):
    """Base exception for session token errors."""

    pass


class TokenExpiredError(SessionTokenError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(SessionTokenError):
    """Raised when a token is invalid."""

    pass


class SessionTokenDecoder:
    """Verifies session tokens and extracts identity claims.

    Attributes:
        _settings: Session token settings.
    """

    def __init__(self, settings: AuthSettings) -> None:
        """Initialize the decoder.

        Args:
            settings: Session token settings.
        """
        self._settings = settings

    def decode_token(self, token: str) -> SessionClaims:
        """Decode and validate a session token.

        Args:
            token: Encoded token string.

        Returns:
            Identity claims of the caller.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        options = {"verify_aud": self._settings.audience is not None}
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options=options,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")

        return SessionClaims(
            sub=str(payload["sub"]),
            email=payload.get("email"),
            given_name=payload.get("given_name"),
            family_name=payload.get("family_name"),
        )

    def encode_token(
        self,
        claims: SessionClaims,
        expires_in: timedelta = timedelta(hours=1),
    ) -> str:
        """Encode claims into a signed token.

        Used by tests and local tooling; production tokens come from the
        identity provider.

        Args:
            claims: Identity claims to embed.
            expires_in: Token lifetime.

        Returns:
            Encoded token string.
        """
        now = datetime.now(timezone.utc)
        payload = {
            **claims.model_dump(exclude_none=True),
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        if self._settings.audience:
            payload["aud"] = self._settings.audience
        if self._settings.issuer:
            payload["iss"] = self._settings.issuer

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )
