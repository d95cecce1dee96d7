"""
Error taxonomy for the marketplace client.

Every error carries a user-facing ``message``; controllers catch
``MarketplaceError`` at their boundary and render that text inline.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from bibocom.constants.messages import Messages


class MarketplaceError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthRequiredError(MarketplaceError):
    """No session token: the call was never attempted."""

    def __init__(self, message: str = Messages.AUTH_REQUIRED) -> None:
        super().__init__(message)


class ClientValidationError(MarketplaceError):
    """Input rejected client side, before any network call."""


class MediaValidationError(ClientValidationError):
    """A file could not be staged as a message attachment."""

    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class NetworkError(MarketplaceError):
    """The request never produced an HTTP response."""


class ApiError(MarketplaceError):
    """Non-2xx response from the backend."""

    def __init__(
        self,
        status_code: int,
        message: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}

    @staticmethod
    def from_response(response: requests.Response, fallback: str) -> ApiError:
        """
        Build the matching ApiError subclass for a failed response.

        The body's ``message`` (then ``error``) is used verbatim; the fallback
        text applies when the body is empty or not JSON.
        """
        payload: dict[str, Any] = {}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            payload = body
        message = payload.get("message") or payload.get("error") or fallback
        error_cls = _STATUS_ERRORS.get(response.status_code, ServerError)
        return error_cls(response.status_code, str(message), payload)


class AuthExpiredError(ApiError):
    """401: the token is no longer accepted. The session has been destroyed."""


class ForbiddenError(ApiError):
    """403: authenticated but not allowed to perform the action."""


class NotFoundError(ApiError):
    """404."""


class ServerError(ApiError):
    """Any other non-2xx response."""


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    401: AuthExpiredError,
    403: ForbiddenError,
    404: NotFoundError,
}
