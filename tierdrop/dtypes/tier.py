from __future__ import annotations

"""
Tier records for the drop table.

A `Tier` is the mutable record owned by the drop table; `TierSnapshot` is the
frozen, JSON-friendly view handed to callers by `drops()`. Prices are integer
base units, dates are UNIX seconds with 0 meaning "not scheduled".
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class TierState(str, Enum):
    PENDING = "pending"      # start unset or in the future
    ACTIVE = "active"        # lowest unsold tier whose start has passed
    BLOCKED = "blocked"      # start has passed but an earlier tier is unsold
    SOLD_OUT = "sold_out"


@dataclass
class Tier:
    index: int
    tokens_allocated: int
    price: int = 0
    start_date: int = 0
    last_price_change: int = 0
    tokens_minted: int = 0

    @property
    def scheduled(self) -> bool:
        return self.start_date > 0

    @property
    def remaining(self) -> int:
        return self.tokens_allocated - self.tokens_minted

    @property
    def sold_out(self) -> bool:
        return self.tokens_minted >= self.tokens_allocated

    def started(self, now: int) -> bool:
        return self.scheduled and self.start_date <= now

    def snapshot(self) -> "TierSnapshot":
        return TierSnapshot(
            index=self.index,
            price=self.price,
            start_date=self.start_date,
            last_price_change=self.last_price_change,
            tokens_allocated=self.tokens_allocated,
            tokens_minted=self.tokens_minted,
        )


@dataclass(frozen=True)
class TierSnapshot:
    index: int
    price: int
    start_date: int
    last_price_change: int
    tokens_allocated: int
    tokens_minted: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["TierState", "Tier", "TierSnapshot"]
