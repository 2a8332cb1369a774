from __future__ import annotations

"""
tierdrop.mint
-------------

Self-service public sale of one token.

Validation (in order, all before any mutation):
  1. caller == buyer, else Unauthorized
  2. a tier is active at `now`, else NoActiveDrop
  3. payment >= active tier price, else InsufficientPayment
     (overpayment is accepted and retained, never refunded)

Effect: the next global token id goes to the buyer, the active tier's
`tokens_minted` and the ledger's `total_minted` advance by one, the whole
payment is credited to the treasury, and a `Minted` event is emitted. The id
is returned directly.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

from tierdrop import metrics
from tierdrop.dtypes.events import EventType, MintSource
from tierdrop.errors import InsufficientPayment, NoActiveDrop, Unauthorized
from tierdrop.state import DropState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MintReceipt:
    token_id: int
    buyer: str
    tier: int
    price: int
    paid: int
    ts: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def mint(state: DropState, buyer: str, payment: int, *, caller: str, now: int) -> MintReceipt:
    if not buyer or caller != buyer:
        raise Unauthorized(caller=caller, message="mint is self-service: caller must be the buyer")
    if payment < 0:
        raise InsufficientPayment(required=0, sent=payment)

    status = state.scheduler.status(now)
    if not status.active:
        raise NoActiveDrop(current_index=status.current_index, as_of=now)
    tier = state.table.tier(status.current_index)
    if payment < tier.price:
        raise InsufficientPayment(required=tier.price, sent=payment)

    token_id = state.ledger.mint_to(buyer)
    tier.tokens_minted += 1
    state.treasury.credit(payment, ts=now, reason="mint")
    state.events.emit(
        EventType.MINTED,
        now,
        token_id=token_id,
        to=buyer,
        tier=tier.index,
        price=tier.price,
        paid=payment,
        source=MintSource.SALE.value,
    )

    metrics.TOKENS_MINTED.labels(source=MintSource.SALE.value, tier=str(tier.index)).inc()
    metrics.PAYMENTS_RECEIVED.inc(payment)
    log.debug("mint: token=%d buyer=%s tier=%d paid=%d", token_id, buyer, tier.index, payment)
    if tier.sold_out:
        log.info("mint: tier %d sold out at=%d", tier.index, now)

    return MintReceipt(
        token_id=token_id,
        buyer=buyer,
        tier=tier.index,
        price=tier.price,
        paid=payment,
        ts=now,
    )


__all__ = ["MintReceipt", "mint"]
