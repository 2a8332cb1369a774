from __future__ import annotations

"""
Drop scheduler: the state machine
----------------------------------

Nothing here is stored. Every answer is derived from the tier counters and a
caller-supplied `now`:

  current index  lowest tier that is not sold out (TIER_COUNT once all are)
  active         current tier has a start date and start_date <= now
  complete       every tier is sold out

Progression is strictly sequential by sellout, never by calendar: tier i+1
cannot become active while tier i has unsold units, however long ago its own
start date passed. That is what produces stalled tiers, and why
`tierdrop.remediation` exists.
"""

from typing import Iterable, List, Optional, Sequence

from tierdrop.config import ScheduleRules, STALL_PRICE_CEILING
from tierdrop.dtypes.status import DropStatus
from tierdrop.dtypes.tier import Tier, TierState


def current_index(tiers: Sequence[Tier]) -> int:
    for t in tiers:
        if not t.sold_out:
            return t.index
    return len(tiers)


def compute_status(tiers: Sequence[Tier], now: int) -> DropStatus:
    idx = current_index(tiers)
    if idx >= len(tiers):
        return DropStatus(current_index=idx, active=False, complete=True, as_of_time=now)
    return DropStatus(
        current_index=idx,
        active=tiers[idx].started(now),
        complete=False,
        as_of_time=now,
    )


def active_tier(tiers: Sequence[Tier], now: int) -> Optional[Tier]:
    st = compute_status(tiers, now)
    return tiers[st.current_index] if st.active else None


def tier_states(tiers: Sequence[Tier], now: int) -> List[TierState]:
    idx = current_index(tiers)
    out: List[TierState] = []
    for t in tiers:
        if t.sold_out:
            out.append(TierState.SOLD_OUT)
        elif not t.started(now):
            out.append(TierState.PENDING)
        elif t.index == idx:
            out.append(TierState.ACTIVE)
        else:
            out.append(TierState.BLOCKED)
    return out


def stall_blockers(tier: Tier, now: int, rules: ScheduleRules) -> List[str]:
    """
    Reasons the given (current) tier may not be remediated yet; empty when it
    is genuinely stalled. The price cooldown must be strictly exceeded.
    """
    reasons: List[str] = []
    if tier.sold_out:
        reasons.append("sold_out")
        return reasons
    if not tier.started(now):
        reasons.append("not_active")
        return reasons
    if now - tier.start_date < rules.stall_age:
        reasons.append("too_young")
    if now - tier.last_price_change <= rules.price_cooldown:
        reasons.append("price_cooldown")
    if tier.price > STALL_PRICE_CEILING:
        reasons.append("price_above_ceiling")
    return reasons


class DropScheduler:
    """Convenience wrapper binding the derivations above to one tier set."""

    def __init__(self, tiers: Iterable[Tier], rules: ScheduleRules) -> None:
        self._tiers = tiers
        self.rules = rules

    def _seq(self) -> Sequence[Tier]:
        return tuple(self._tiers)

    def status(self, now: int) -> DropStatus:
        return compute_status(self._seq(), now)

    def active_tier(self, now: int) -> Optional[Tier]:
        return active_tier(self._seq(), now)

    def current_tier(self) -> Optional[Tier]:
        seq = self._seq()
        idx = current_index(seq)
        return seq[idx] if idx < len(seq) else None

    def states(self, now: int) -> List[TierState]:
        return tier_states(self._seq(), now)

    def stall_blockers(self, now: int) -> List[str]:
        t = self.current_tier()
        if t is None:
            return ["complete"]
        return stall_blockers(t, now, self.rules)

    def is_stalled(self, now: int) -> bool:
        return not self.stall_blockers(now)


__all__ = [
    "current_index",
    "compute_status",
    "active_tier",
    "tier_states",
    "stall_blockers",
    "DropScheduler",
]
