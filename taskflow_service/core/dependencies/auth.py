"""Authentication dependencies.

Usage:
    from taskflow_service.core.dependencies.auth import AuthUserDep

    @router.get("/profile")
    async def get_profile(user: AuthUserDep):
        return {"user_id": user.user_id}

Tests replace the client through dependency overrides:

    app.dependency_overrides[get_auth_client] = lambda: MockAuthClient.user(user_id)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskflow_service.core.exceptions import MissingAuthenticationError
from taskflow_service.core.schemas.auth import AuthUser
from taskflow_service.core.settings import get_auth_settings
from taskflow_service.infra.auth.http_client import HttpAuthClient
from taskflow_service.infra.auth.protocols import AuthClient
from taskflow_service.infra.auth.testing import MockAuthClient
from taskflow_service.infra.logging.context import set_log_context

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from the auth service")


@lru_cache(maxsize=1)
def get_auth_client() -> AuthClient:
    """Get the process-wide auth client.

    Development mode authenticates every token as AUTH_DEV_MOCK_USER.
    """
    settings = get_auth_settings()
    if settings.dev_mode:
        logger.warning(
            "Auth dev mode enabled, all tokens are accepted",
            extra={"dev_mock_user": settings.dev_mock_user},
        )
        return MockAuthClient(user_id=settings.dev_mock_user, email=None)
    return HttpAuthClient(settings)


AuthClientDep = Annotated[AuthClient, Depends(get_auth_client)]


async def get_current_user(
    request: Request,
    client: AuthClientDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthUser:
    """Resolve the caller from the Authorization header.

    Raises:
        MissingAuthenticationError: No bearer token was sent.
        TokenInvalidError: The auth service rejected the token.
    """
    if credentials is None or not credentials.credentials:
        raise MissingAuthenticationError(instance=request.url.path)

    user = await client.validate_token(credentials.credentials)
    set_log_context(user_id=user.user_id)
    return user


AuthUserDep = Annotated[AuthUser, Depends(get_current_user)]
