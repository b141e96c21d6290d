"""Authentication clients."""

from taskflow_service.infra.auth.http_client import HttpAuthClient
from taskflow_service.infra.auth.protocols import AuthClient
from taskflow_service.infra.auth.testing import MockAuthClient

__all__ = ["AuthClient", "HttpAuthClient", "MockAuthClient"]
