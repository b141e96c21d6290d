"""Mock authentication client (Protocol-based test double).

Also used in development mode, where any bearer token authenticates as a
fixed user.
"""

from __future__ import annotations

import logging
from typing import Self

from taskflow_service.core.exceptions import TokenInvalidError
from taskflow_service.core.schemas.auth import AuthUser

logger = logging.getLogger(__name__)

DEFAULT_MOCK_USER_ID = "00000000-0000-4000-8000-000000000001"


class MockAuthClient:
    """Deterministic AuthClient without external services.

    By default every token authenticates as ``user_id``. Registered tokens
    map to their own users, and ``unauthorized()`` rejects every token.

    Example:
        mock = MockAuthClient(user_id="6f1c...")
        user = await mock.validate_token("anything")

        mock = MockAuthClient()
        mock.register_token("alice-token", "1b2c...")
        mock.register_token("bob-token", "9e8d...")
    """

    def __init__(
        self,
        user_id: str = DEFAULT_MOCK_USER_ID,
        email: str | None = "user@example.com",
        *,
        reject_all: bool = False,
        accept_unregistered: bool = True,
    ) -> None:
        self.user_id = user_id
        self.email = email
        self.reject_all = reject_all
        self.accept_unregistered = accept_unregistered
        self._token_registry: dict[str, AuthUser] = {}

    @classmethod
    def user(cls, user_id: str = DEFAULT_MOCK_USER_ID) -> Self:
        """A client that accepts any token as ``user_id``."""
        return cls(user_id=user_id)

    @classmethod
    def unauthorized(cls) -> Self:
        """A client that rejects every token."""
        return cls(reject_all=True)

    def register_token(self, token: str, user_id: str, email: str | None = None) -> None:
        """Map a token to a specific user; unregistered tokens then fall back to the default."""
        self._token_registry[token] = AuthUser(user_id=user_id, email=email)

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def mode(self) -> str:
        return "mock"

    async def validate_token(self, token: str) -> AuthUser:
        if self.reject_all or not token:
            raise TokenInvalidError()

        if token in self._token_registry:
            return self._token_registry[token]

        if not self.accept_unregistered:
            raise TokenInvalidError()

        logger.debug("MockAuthClient accepted token", extra={"user_id": self.user_id})
        return AuthUser(user_id=self.user_id, email=self.email)
