"""
Base REST client.

Every request goes through ``ApiClient._request``, which applies the one
auth-failure policy of the client: a 401 destroys the session (forced
logout) and raises ``AuthExpiredError``; a 403 raises ``ForbiddenError``
and keeps the session.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from bibocom.config import Settings, get_settings
from bibocom.constants.messages import Messages
from bibocom.core.errors import (
    ApiError,
    AuthExpiredError,
    AuthRequiredError,
    NetworkError,
)
from bibocom.core.session import AuthContext
from bibocom.infra.logging_config import get_logger

logger = get_logger("api")


class ApiClient:
    """Authenticated JSON client for the marketplace backend."""

    def __init__(
        self,
        auth: AuthContext,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self._auth = auth
        self._settings = settings or get_settings()
        self._http = http or requests.Session()

    @property
    def auth(self) -> AuthContext:
        return self._auth

    @property
    def base_url(self) -> str:
        return self._settings.api_url

    def close(self) -> None:
        self._http.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        authenticated: bool = True,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
        fallback_message: str = Messages.GENERIC_ERROR,
    ) -> Any:
        """
        Send one request (no retry) and return the decoded JSON body.

        A 2xx response with an empty or non-JSON body returns ``{}``: callers
        trust the status code and do not validate the body shape strictly.

        Raises:
            AuthRequiredError: authenticated call without a session token.
            NetworkError: no HTTP response (connection error, timeout).
            ApiError: non-2xx response (subclass chosen by status code).
        """
        headers: dict[str, str] = {"Accept": "application/json"}
        if authenticated:
            if not self._auth.is_authenticated:
                raise AuthRequiredError()
            headers.update(self._auth.auth_headers())

        url = self._url(path)
        logger.info("%s %s", method, path)
        try:
            resp = self._http.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=headers,
                timeout=self._settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(fallback_message) from e

        if not resp.ok:
            error = ApiError.from_response(resp, fallback_message)
            logger.warning(
                "%s %s returned HTTP %s: %s",
                method,
                path,
                resp.status_code,
                error.message,
            )
            if isinstance(error, AuthExpiredError) and self._auth.is_authenticated:
                self._auth.logout()
            raise error

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, path)
            return {}
