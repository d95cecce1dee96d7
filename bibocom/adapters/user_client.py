"""Client for public user profiles (``GET /users/:id``)."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from bibocom.adapters.base import ApiClient
from bibocom.constants.messages import Messages
from bibocom.core.errors import ServerError
from bibocom.schemas.user import Partner


class UserClient(ApiClient):
    def get_profile(self, user_id: int) -> dict[str, Any]:
        """Raw profile payload; the body's ``data`` envelope is unwrapped when present."""
        body = self._request("GET", f"/users/{user_id}")
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return body["data"]
        return body if isinstance(body, dict) else {}

    def get_partner(self, user_id: int) -> Partner:
        profile = self.get_profile(user_id)
        try:
            return Partner.from_profile(user_id, profile)
        except ValidationError as e:
            raise ServerError(200, Messages.GENERIC_ERROR, profile) from e
