"""HTTP authentication client backed by httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from taskflow_service.core.exceptions import ServiceUnavailableException, TokenInvalidError
from taskflow_service.core.schemas.auth import AuthUser
from taskflow_service.core.settings import AuthSettings, get_auth_settings

logger = logging.getLogger(__name__)


class HttpAuthClient:
    """Validate bearer tokens by asking the auth service who owns them.

    Sends ``GET {service_url}{token_validation_endpoint}`` with the caller's
    token. A 2xx response carries the user object; 401/403 mean the token
    is invalid. Network errors and 5xx responses are reported as the auth
    service being unavailable, never as a bad token.

    Example:
        ```python
        client = HttpAuthClient()
        user = await client.validate_token("eyJhbGciOi...")
        print(user.user_id)
        ```
    """

    def __init__(
        self,
        settings: AuthSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_auth_settings()
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    @property
    def mode(self) -> str:
        return "external"

    def _headers(self, token: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        if self.settings.api_key is not None:
            headers["apikey"] = self.settings.api_key.get_secret_value()
        return headers

    async def validate_token(self, token: str) -> AuthUser:
        if not self.is_configured:
            msg = "Authentication service is not configured"
            raise ServiceUnavailableException(detail=msg, type="auth-not-configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                verify=self.settings.verify_ssl,
                transport=self._transport,
            ) as client:
                response = await client.get(self.settings.validation_url, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.warning(
                "Auth service request failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise ServiceUnavailableException(
                detail="Authentication service unavailable",
                type="auth-unavailable",
            ) from e

        if response.status_code in {401, 403}:
            raise TokenInvalidError()
        if response.status_code >= 500:
            logger.warning(
                "Auth service returned an error",
                extra={"status_code": response.status_code},
            )
            raise ServiceUnavailableException(
                detail="Authentication service unavailable",
                type="auth-unavailable",
            )
        if response.status_code >= 400:
            raise TokenInvalidError()

        return self._parse_user(response.json())

    @staticmethod
    def _parse_user(payload: dict[str, Any]) -> AuthUser:
        user_id = payload.get("id") or payload.get("sub") or payload.get("user_id")
        if not user_id:
            raise TokenInvalidError(detail="Auth service returned no user")
        return AuthUser(
            user_id=str(user_id),
            email=payload.get("email"),
            role=payload.get("role"),
            metadata=payload.get("user_metadata") or {},
        )
