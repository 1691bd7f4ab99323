"""AuthService: session token verification and privileged identity check."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import jwt

from domain.exceptions import AuthorizationError, ConfigurationError
from domain.value_objects.web_auth import Principal
from shared.config.settings import AuthConfig

logger = logging.getLogger(__name__)


class AuthService:
    """Application service for dashboard session authorization."""

    def __init__(self, config: AuthConfig) -> None:
        self._config = config

    @property
    def session_cookie(self) -> str:
        return self._config.session_cookie

    def verify_session_token(self, token: str) -> Optional[Principal]:
        """
        Decode a signed session token.

        Returns:
            Principal for a valid token, None for an expired or invalid one.

        Raises:
            ConfigurationError: AUTH_JWT_SECRET is not set.
        """
        if not self._config.jwt_secret:
            raise ConfigurationError("Session secret not configured (set AUTH_JWT_SECRET)")
        try:
            payload = jwt.decode(
                token,
                self._config.jwt_secret,
                algorithms=[self._config.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired session token")
            return None
        except jwt.InvalidTokenError:
            return None

        sub = payload.get("sub")
        if not sub:
            return None
        exp = payload.get("exp")
        return Principal(
            sub=str(sub),
            email=payload.get("email"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )

    def authorize(self, principal: Optional[Principal], privileged: bool) -> Principal:
        """
        Check that ``principal`` may read stats.

        Privileged reads (backends that run remote commands) additionally
        require the principal's email to match ALLOWED_EMAIL.
        """
        if principal is None:
            raise AuthorizationError("Unauthorized")
        if not privileged:
            return principal

        allowed = self._config.allowed_email
        if not allowed:
            raise ConfigurationError(
                "Allowed identity not configured (set ALLOWED_EMAIL)"
            )
        if not principal.matches_identity(allowed):
            logger.warning(f"Privileged stats request denied for subject {principal.sub}")
            raise AuthorizationError("Forbidden identity")
        return principal
