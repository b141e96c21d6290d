"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        ```python
        raise AppException(
            status_code=404,
            detail="Task not found",
            type="task-not-found",
            title="Task Not Found",
            instance="/api/v1/tasks/abc123",
            extra={"task_id": "abc123"}
        )
        ```
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            422: "Unprocessable Entity",
            429: "Too Many Requests",
            500: "Internal Server Error",
            502: "Bad Gateway",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class NotFoundException(AppException):
    """Exception raised when a resource is not found.

    Example:
        ```python
        raise NotFoundException(
            detail="Task with ID abc123 not found",
            type="task-not-found",
            extra={"task_id": "abc123"}
        )
        ```
    """

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=404,
            detail=detail,
            type=type,
            title="Not Found",
            instance=instance,
            extra=extra,
        )


class UnauthorizedException(AppException):
    """Exception raised when the caller has no valid session."""

    def __init__(
        self,
        detail: str = "Authentication required",
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


class BadRequestException(AppException):
    """Exception raised for malformed input that is not a body schema error.

    Example:
        ```python
        raise BadRequestException(
            detail="Invalid user ID format",
            type="invalid-user-id",
        )
        ```
    """

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Bad Request",
            instance=instance,
            extra=extra,
        )


class RateLimitException(AppException):
    """Exception raised when rate limit is exceeded.

    The exception handler turns ``extra["retry_after"]`` into a
    ``Retry-After`` response header.

    Example:
        ```python
        raise RateLimitException(
            detail="Too many requests",
            extra={"retry_after": 42, "limit": 5, "window": 60}
        )
        ```
    """

    def __init__(
        self,
        detail: str,
        type: str = "rate-limit-exceeded",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=429,
            detail=detail,
            type=type,
            title="Too Many Requests",
            instance=instance,
            extra=extra,
        )


class ServiceUnavailableException(AppException):
    """Exception raised when a required backing service is down."""

    def __init__(
        self,
        detail: str,
        type: str = "service-unavailable",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=503,
            detail=detail,
            type=type,
            title="Service Unavailable",
            instance=instance,
            extra=extra,
        )


class InternalServerException(AppException):
    """Exception raised for unrecoverable internal failures.

    The detail is shown to the caller, so it must never carry internal
    error text. Chain the original exception instead:

        ```python
        try:
            ...
        except SQLAlchemyError as e:
            raise InternalServerException() from e
        ```
    """

    def __init__(
        self,
        detail: str = "An unexpected error occurred while processing your request",
        type: str = "internal-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type=type,
            title="Internal Server Error",
            instance=instance,
            extra=extra,
        )


# ============================================================================
# Authentication-specific exceptions
# ============================================================================


class MissingAuthenticationError(UnauthorizedException):
    """Raised when no bearer token is provided."""

    def __init__(self, instance: str | None = None) -> None:
        super().__init__(
            detail="Missing authorization header",
            type="missing-authentication",
            instance=instance,
        )


class TokenInvalidError(UnauthorizedException):
    """Raised when the auth service rejects the bearer token."""

    def __init__(self, detail: str = "Invalid or expired token", instance: str | None = None) -> None:
        super().__init__(detail=detail, type="token-invalid", instance=instance)
