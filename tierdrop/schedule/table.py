from __future__ import annotations

"""
Drop table
----------

Owns the four tiers (price, start date, last price change, allocation and
minted count) and the rules for editing them.

Two owner-only edits exist:

  • `update_tier`: reschedule a future tier (price + start date). Subject to
    the lead-time rules so buyers get fair notice:
      - only tiers 1..3 (tier 0 opens at initialization)
      - the tier must not be sold out or already started
      - a scheduled tier is locked once it is inside its lead window
      - the new start must be at least `min_lead_time` from now
      - the new start may not precede the previous tier's start
        (plus `min_tier_gap`) when that tier is scheduled
    On success `last_price_change` is set to the new start date.

  • `adjust_price`: live price change on any tier that is not sold out, with
    no lead-time restriction. `last_price_change` becomes now, which restarts
    the remediation cooldown.

`now` is always passed in by the caller; the table never reads a clock.
"""

import logging
from typing import Iterable, List, Sequence

from tierdrop.access import Ownable
from tierdrop.config import TIER_COUNT, ScheduleRules
from tierdrop.dtypes.tier import Tier, TierSnapshot
from tierdrop.errors import InvalidTransition

log = logging.getLogger(__name__)


class DropTable:
    def __init__(self, allocations: Sequence[int], rules: ScheduleRules, access: Ownable) -> None:
        if len(allocations) != TIER_COUNT:
            raise ValueError(f"expected {TIER_COUNT} tier allocations, got {len(allocations)}")
        if any(a <= 0 for a in allocations):
            raise ValueError("every tier needs a positive allocation")
        self._tiers: List[Tier] = [
            Tier(index=i, tokens_allocated=int(a)) for i, a in enumerate(allocations)
        ]
        self.rules = rules
        self._access = access

    # --- introspection ---

    def __len__(self) -> int:
        return len(self._tiers)

    def __iter__(self):
        return iter(self._tiers)

    def tier(self, index: int) -> Tier:
        self._check_index(index, allowed=range(TIER_COUNT))
        return self._tiers[index]

    def tiers(self) -> Iterable[Tier]:
        return tuple(self._tiers)

    def snapshots(self) -> List[TierSnapshot]:
        return [t.snapshot() for t in self._tiers]

    # --- mutations ---

    def open_first(self, price: int, now: int) -> Tier:
        """Activate tier 0 at `now`; used once, by initialization."""
        t = self._tiers[0]
        t.price = int(price)
        t.start_date = int(now)
        t.last_price_change = int(now)
        log.info("table: tier 0 opened price=%d at=%d", t.price, now)
        return t

    def update_tier(self, index: int, price: int, start_date: int, *, caller: str, now: int) -> TierSnapshot:
        self._access.require_owner(caller)
        self._check_index(index, allowed=range(1, TIER_COUNT))
        t = self._tiers[index]
        lead = self.rules.min_lead_time

        if price < 0:
            raise InvalidTransition("price must be non-negative", index=index, details={"price": price})
        if t.sold_out:
            raise InvalidTransition("tier is sold out", index=index)
        if t.started(now):
            raise InvalidTransition(
                "tier has already started", index=index, details={"start_date": t.start_date, "now": now}
            )
        if t.scheduled and t.start_date < now + lead:
            raise InvalidTransition(
                "tier is locked inside its lead window",
                index=index,
                details={"start_date": t.start_date, "now": now, "min_lead_time": lead},
            )
        if start_date < now + lead:
            raise InvalidTransition(
                "start date is inside the minimum lead time",
                index=index,
                details={"start_date": start_date, "earliest": now + lead},
            )
        prev = self._tiers[index - 1]
        if prev.scheduled and start_date < prev.start_date + self.rules.min_tier_gap:
            raise InvalidTransition(
                "start date precedes the previous tier",
                index=index,
                details={"start_date": start_date, "earliest": prev.start_date + self.rules.min_tier_gap},
            )

        t.price = int(price)
        t.start_date = int(start_date)
        t.last_price_change = int(start_date)
        log.info("table: tier %d scheduled price=%d start=%d", index, t.price, t.start_date)
        return t.snapshot()

    def adjust_price(self, index: int, price: int, *, caller: str, now: int) -> TierSnapshot:
        self._access.require_owner(caller)
        self._check_index(index, allowed=range(TIER_COUNT))
        t = self._tiers[index]
        if price < 0:
            raise InvalidTransition("price must be non-negative", index=index, details={"price": price})
        if t.sold_out:
            raise InvalidTransition("tier is sold out", index=index)

        old = t.price
        t.price = int(price)
        t.last_price_change = int(now)
        log.info("table: tier %d price %d -> %d at=%d", index, old, t.price, now)
        return t.snapshot()

    # --- helpers ---

    @staticmethod
    def _check_index(index: int, *, allowed: range) -> None:
        if not isinstance(index, int) or index not in allowed:
            raise InvalidTransition(
                "tier index not editable",
                details={"index": index, "allowed": [allowed.start, allowed.stop - 1]},
            )


__all__ = ["DropTable"]
