"""Session authentication: JWT from Bearer header or session cookie."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from domain.value_objects.web_auth import Principal

logger = logging.getLogger(__name__)

BEARER_SCHEME = HTTPBearer(auto_error=False)


def _get_auth_service():
    """Lazy import to avoid circular dependencies."""
    from presentation.api.dependencies import get_container

    return get_container().auth_service()


def session_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    cookie_name: str,
) -> Optional[str]:
    """Bearer header wins over the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(cookie_name) or None


async def get_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(BEARER_SCHEME),
) -> Optional[Principal]:
    """
    Verify the session token, if any.

    Returns None when no token was sent or it does not verify; the route
    decides whether that is acceptable.
    """
    auth_service = _get_auth_service()
    token = session_token_from_request(request, credentials, auth_service.session_cookie)
    if not token:
        return None
    principal = auth_service.verify_session_token(token)
    if principal is None:
        logger.info("Invalid or expired session token")
    return principal
