"""Promo codes recognised by the cart."""

from enum import StrEnum


class PromoCode(StrEnum):
    """Known promo codes. Codes are matched case-insensitively."""

    BIBOSPRING20 = "BIBOSPRING20"
