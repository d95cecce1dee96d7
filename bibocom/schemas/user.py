"""User and conversation partner schemas."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional

from bibocom.schemas.base import ApiModel


class UserRole(StrEnum):
    """Marketplace roles."""

    CLIENT = "CLIENT"
    MERCHANT = "MERCHANT"
    SUPPLIER = "SUPPLIER"

    @property
    def label(self) -> str:
        return USER_ROLE_LABELS[self]


USER_ROLE_LABELS: dict[UserRole, str] = {
    UserRole.CLIENT: "Client",
    UserRole.MERCHANT: "Merchant",
    UserRole.SUPPLIER: "Supplier",
}

DEFAULT_PARTNER_FIRST_NAME = "User"
DEFAULT_PARTNER_NAME = "Shop"
DEFAULT_PARTNER_ROLE = "Member"


class User(ApiModel):
    """The logged-in user record, as returned by the login endpoint."""

    id: int
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: Optional[UserRole] = None
    photo: Optional[str] = None
    phone_number: Optional[str] = None
    is_verified: bool = False
    country: Optional[str] = None
    city: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Partner(ApiModel):
    """Counterpart of a one-to-one conversation."""

    id: int
    first_name: str = ""
    last_name: str = ""
    username: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None
    role: Optional[str] = None
    partner_name: Optional[str] = None
    partner_photo: Optional[str] = None
    partner_role: Optional[str] = None
    is_placeholder: bool = False

    @property
    def display_name(self) -> str:
        """Best available name for headers and avatars."""
        if self.partner_name:
            return self.partner_name
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username or f"user{self.id}"

    @classmethod
    def placeholder(cls, partner_id: int) -> Partner:
        """Minimal partner used when no profile could be fetched."""
        return cls(
            id=partner_id,
            first_name=DEFAULT_PARTNER_FIRST_NAME,
            last_name=str(partner_id),
            username=f"user{partner_id}",
            photo=None,
            partner_name=DEFAULT_PARTNER_NAME,
            partner_role=DEFAULT_PARTNER_ROLE,
            is_placeholder=True,
        )

    @classmethod
    def from_profile(cls, partner_id: int, profile: dict[str, Any]) -> Partner:
        """Build a partner from a ``GET /users/:id`` profile payload."""
        return cls(
            id=partner_id,
            first_name=profile.get("firstName") or DEFAULT_PARTNER_FIRST_NAME,
            last_name=profile.get("lastName") or str(partner_id),
            username=profile.get("username") or f"user{partner_id}",
            email=profile.get("email"),
            photo=profile.get("profilePhoto") or profile.get("photo"),
            role=profile.get("role"),
            partner_name=profile.get("shopName") or DEFAULT_PARTNER_NAME,
            partner_role=profile.get("role") or DEFAULT_PARTNER_ROLE,
        )
