"""Authentication client protocol definitions.

Any class with these members satisfies the protocol through structural
subtyping, which lets tests swap in MockAuthClient without a mocking
library.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from taskflow_service.core.schemas.auth import AuthUser


@runtime_checkable
class AuthClient(Protocol):
    """Protocol for resolving bearer tokens to users.

    Implementations:
        - HttpAuthClient: validates tokens against the external auth service
        - MockAuthClient: deterministic test double

    Example:
        @router.get("/me")
        async def me(token: str, auth_client: AuthClientDep):
            user = await auth_client.validate_token(token)
            return {"user_id": user.user_id}
    """

    @property
    def is_configured(self) -> bool:
        """True when the client can validate tokens."""
        ...

    @property
    def mode(self) -> str:
        """Operational mode: "external" or "mock"."""
        ...

    async def validate_token(self, token: str) -> AuthUser:
        """Resolve a bearer token to its user.

        Raises:
            TokenInvalidError: If the token is unknown, expired or rejected.
            ServiceUnavailableException: If the auth service cannot be reached.
        """
        ...
