from __future__ import annotations

"""
tierdrop.royalty
----------------

Advertised royalty: one global receiver and rate for the whole collection.

`royalty_for(sale_price)` is `sale_price * basis_points // 10_000`, i.e. the
amount is floored to the base unit. The token id passed to `royalty_info` is
accepted for interface compatibility and ignored.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from tierdrop.access import Ownable
from tierdrop.config import BPS_DENOMINATOR, MAX_ROYALTY_BPS
from tierdrop.errors import InvalidRate


@dataclass(frozen=True)
class RoyaltyConfig:
    receiver: str
    basis_points: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def royalty_amount(sale_price: int, basis_points: int) -> int:
    if sale_price < 0:
        raise ValueError(f"sale_price must be non-negative, got {sale_price}")
    return (int(sale_price) * int(basis_points)) // BPS_DENOMINATOR


def _check_rate(basis_points: int) -> None:
    if not (0 <= basis_points <= MAX_ROYALTY_BPS):
        raise InvalidRate(basis_points=basis_points, maximum=MAX_ROYALTY_BPS)


class RoyaltyRegistry:
    def __init__(self, receiver: str, basis_points: int, access: Ownable) -> None:
        _check_rate(basis_points)
        self._config = RoyaltyConfig(receiver=receiver, basis_points=int(basis_points))
        self._access = access

    @property
    def config(self) -> RoyaltyConfig:
        return self._config

    def set_royalty(self, receiver: str, basis_points: int, *, caller: str) -> RoyaltyConfig:
        self._access.require_owner(caller)
        _check_rate(basis_points)
        if not receiver:
            raise ValueError("receiver must be a non-empty address")
        self._config = RoyaltyConfig(receiver=receiver, basis_points=int(basis_points))
        return self._config

    def royalty_for(self, sale_price: int) -> int:
        return royalty_amount(sale_price, self._config.basis_points)

    def royalty_info(self, token_id: int, sale_price: int) -> int:
        return self.royalty_for(sale_price)


__all__ = ["RoyaltyConfig", "RoyaltyRegistry", "royalty_amount"]
