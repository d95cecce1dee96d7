"""
Promo code policies.

Codes map to a discount policy in a ``PromoRegistry``. Lookup is an exact,
case-insensitive match on the whole code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from bibocom.constants.promo_codes import PromoCode


class DiscountPolicy(Protocol):
    def discount(self, subtotal: float) -> float: ...


@dataclass(frozen=True)
class PercentageDiscount:
    percent: float

    def discount(self, subtotal: float) -> float:
        return subtotal * self.percent / 100


class PromoRegistry:
    def __init__(self) -> None:
        self._policies: Dict[str, DiscountPolicy] = {}

    def register(self, code: str, policy: DiscountPolicy) -> None:
        key = _normalize(code)
        if not key:
            raise ValueError("Promo code cannot be empty")
        if key in self._policies:
            raise ValueError(f"Promo code already registered: {code}")
        self._policies[key] = policy

    def lookup(self, code: str) -> Optional[DiscountPolicy]:
        return self._policies.get(_normalize(code))

    def codes(self) -> list[str]:
        return list(self._policies)


def _normalize(code: str) -> str:
    return code.upper()


def default_promo_registry() -> PromoRegistry:
    registry = PromoRegistry()
    registry.register(PromoCode.BIBOSPRING20, PercentageDiscount(20))
    return registry
