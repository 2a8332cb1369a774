from __future__ import annotations

"""
tierdrop.remediation
--------------------

Owner override for a tier that has stopped selling.

Because progression is by sellout, an unsold tier blocks every later tier
forever. `remediate_stalled` lets the owner mint the remaining units of the
*current* tier to themselves, which completes it and lets the schedule move
on. It only applies to a tier that is genuinely stalled:

  • active, and its start date is at least `stall_age` (30 days) old
  • its price last changed strictly more than `price_cooldown` (14 days) ago,
    so a last-minute price cut cannot be used to skip fair notice
  • its price is at or below STALL_PRICE_CEILING, a protocol constant the
    owner cannot raise

Any unmet condition raises NotStalled with the list of blockers.
"""

import logging
from typing import List

from tierdrop import metrics
from tierdrop.dtypes.events import EventType, MintSource
from tierdrop.errors import NotStalled
from tierdrop.state import DropState

log = logging.getLogger(__name__)


def remediate_stalled(state: DropState, *, caller: str, now: int) -> List[int]:
    state.access.require_owner(caller)

    tier = state.scheduler.current_tier()
    if tier is None:
        raise NotStalled("every tier is sold out", details={"blockers": ["complete"]})
    blockers = state.scheduler.stall_blockers(now)
    if blockers:
        raise NotStalled(
            index=tier.index,
            details={
                "blockers": blockers,
                "start_date": tier.start_date,
                "last_price_change": tier.last_price_change,
                "price": tier.price,
                "now": now,
            },
        )

    owner = state.access.owner
    minted = state.ledger.mint_many(owner, tier.remaining)
    tier.tokens_minted = tier.tokens_allocated
    for tid in minted:
        state.events.emit(
            EventType.MINTED,
            now,
            token_id=tid,
            to=owner,
            tier=tier.index,
            price=0,
            paid=0,
            source=MintSource.REMEDIATION.value,
        )
    state.events.emit(EventType.STALLED_REMEDIATED, now, tier=tier.index, token_ids=list(minted))

    metrics.TOKENS_MINTED.labels(source=MintSource.REMEDIATION.value, tier=str(tier.index)).inc(len(minted))
    metrics.REMEDIATIONS.labels(tier=str(tier.index)).inc()
    log.info("remediation: tier %d completed to owner, %d tokens", tier.index, len(minted))
    return minted


__all__ = ["remediate_stalled"]
