from __future__ import annotations

"""
tierdrop.collection
-------------------

`DropCollection` is the single coordinator for a tiered drop. It owns the one
`DropState`, the clock, and a coarse `threading.RLock`; every public operation
runs as one atomic unit under that lock:

    read clock once -> derive status -> validate -> mutate -> check invariants

Validation always precedes mutation, so a raised `DropError` means nothing
changed. The clock is read exactly once per operation and the same `now` is
passed to every component involved.

Typical flow
~~~~~~~~~~~~
>>> clk = ManualClock(1_700_000_000)
>>> drop = DropCollection(owner="0xowner", clock=clk)
>>> drop.initialize(caller="0xowner")          # reserve minted, tier 0 open
>>> tid = drop.mint("0xalice", 10**16, caller="0xalice")
>>> drop.status().current_index
0
"""

import logging
from contextlib import contextmanager
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional

from tierdrop import metrics
from tierdrop.clock import Clock, system_clock
from tierdrop.config import DropConfig, TIER_COUNT
from tierdrop.dtypes.events import DropEvent, EventType, MintSource
from tierdrop.dtypes.status import DropStatus
from tierdrop.dtypes.tier import TierSnapshot, TierState
from tierdrop.errors import AlreadyInitialized, DropError
from tierdrop.mint import MintReceipt, mint as _mint
from tierdrop.remediation import remediate_stalled as _remediate
from tierdrop.royalty import RoyaltyConfig
from tierdrop.state import DropState
from tierdrop.treasury.state import JournalEntry
from tierdrop.treasury.withdraw import Payout

log = logging.getLogger(__name__)


class DropCollection:
    def __init__(
        self,
        owner: str,
        *,
        config: Optional[DropConfig] = None,
        clock: Clock = system_clock,
    ) -> None:
        self._state = DropState.build(owner, config or DropConfig())
        self._clock = clock
        self._lock = RLock()
        self._refresh_gauges()

    # --- plumbing ---

    @property
    def config(self) -> DropConfig:
        return self._state.config

    def _now(self) -> int:
        return int(self._clock())

    @contextmanager
    def _op(self, name: str) -> Iterator[int]:
        """Serialize one operation, hand it a single `now`, count rejections."""
        with self._lock:
            try:
                yield self._now()
            except DropError as e:
                metrics.REJECTIONS.labels(op=name, code=e.code).inc()
                log.debug("%s rejected: %s", name, e)
                raise
            self._state.check_invariants()
            self._refresh_gauges()

    def _refresh_gauges(self) -> None:
        metrics.UNMINTED.set(self._state.ledger.unminted)
        tier = self._state.scheduler.current_tier()
        metrics.CURRENT_TIER.set(tier.index if tier is not None else TIER_COUNT)

    # --- queries ---

    def owner(self) -> str:
        return self._state.access.owner

    def is_initialized(self) -> bool:
        return self._state.initialized

    def status(self) -> DropStatus:
        with self._lock:
            return self._state.scheduler.status(self._now())

    def tier_states(self) -> List[TierState]:
        with self._lock:
            return self._state.scheduler.states(self._now())

    def is_stalled(self) -> bool:
        with self._lock:
            return self._state.scheduler.is_stalled(self._now())

    def drops(self) -> List[TierSnapshot]:
        with self._lock:
            return self._state.table.snapshots()

    def total_supply(self) -> int:
        return self._state.ledger.total_supply

    def total_minted(self) -> int:
        with self._lock:
            return self._state.ledger.total_minted

    def unminted(self) -> int:
        with self._lock:
            return self._state.ledger.unminted

    def tokens_per_tier(self) -> int:
        """Base allocation per tier (the last tier also carries any remainder)."""
        return self._state.config.supply.sellable() // TIER_COUNT

    def balance_of(self, holder: str) -> int:
        with self._lock:
            return self._state.ledger.owners.balance_of(holder)

    def token_ids_of(self, holder: str) -> List[int]:
        with self._lock:
            return self._state.ledger.owners.token_ids_of(holder)

    def owner_of(self, token_id: int) -> str:
        with self._lock:
            return self._state.ledger.owners.owner_of(token_id)

    def royalty_info(self, token_id: int, sale_price: int) -> int:
        with self._lock:
            return self._state.royalty.royalty_info(token_id, sale_price)

    def royalty_for(self, sale_price: int) -> int:
        with self._lock:
            return self._state.royalty.royalty_for(sale_price)

    def royalty_config(self) -> RoyaltyConfig:
        with self._lock:
            return self._state.royalty.config

    def treasury_balance(self) -> int:
        with self._lock:
            return self._state.treasury.balance

    def payouts(self) -> List[Payout]:
        with self._lock:
            return list(self._state.desk.payouts())

    def treasury_journal(self) -> List[JournalEntry]:
        """Every credit (mint payment) and debit (withdrawal), oldest first."""
        with self._lock:
            return list(self._state.treasury.journal())

    def events(self, since: int = 0, etype: Optional[EventType] = None) -> List[DropEvent]:
        with self._lock:
            return self._state.events.since(since, etype)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of everything observable, at one instant."""
        with self._lock:
            now = self._now()
            st = self._state
            received, withdrawn = st.treasury.totals()
            return {
                "owner": st.access.owner,
                "initialized": st.initialized,
                "status": st.scheduler.status(now).to_dict(),
                "tiers": [
                    {**snap.to_dict(), "state": state.value}
                    for snap, state in zip(st.table.snapshots(), st.scheduler.states(now))
                ],
                "supply": {**st.ledger.snapshot(), "tokens_per_tier": self.tokens_per_tier()},
                "royalty": st.royalty.config.to_dict(),
                "treasury": {
                    "balance": st.treasury.balance,
                    "received": received,
                    "withdrawn": withdrawn,
                    "journal": [e.to_dict() for e in st.treasury.journal()],
                },
            }

    # --- mutations ---

    def initialize(self, *, caller: str) -> List[int]:
        """
        One-time, owner-only: mint the reserve and open tier 0 at "now" with the
        configured opening price. Returns the reserve token ids in mint order.
        """
        with self._op("initialize") as now:
            st = self._state
            st.access.require_owner(caller)
            if st.initialized:
                raise AlreadyInitialized("drop already initialized")

            supply = st.config.supply
            minted: List[int] = []
            for holder, count in [(st.access.owner, supply.reserve_owner), *supply.reserve_wallets.items()]:
                for tid in st.ledger.mint_many(holder, count, reserve=True):
                    minted.append(tid)
                    st.events.emit(
                        EventType.MINTED, now, token_id=tid, to=holder, tier=None,
                        price=0, paid=0, source=MintSource.RESERVE.value,
                    )
            st.table.open_first(supply.opening_price, now)
            st.initialized = True
            st.events.emit(EventType.INITIALIZED, now, reserve=list(minted), opening_price=supply.opening_price)

            metrics.TOKENS_MINTED.labels(source=MintSource.RESERVE.value, tier="reserve").inc(len(minted))
            log.info("collection: initialized reserve=%d opening_price=%d", len(minted), supply.opening_price)
            return minted

    def mint(self, buyer: str, payment: int, *, caller: str) -> int:
        """Buy one token from the active tier; returns the new token id."""
        return self.mint_with_receipt(buyer, payment, caller=caller).token_id

    def mint_with_receipt(self, buyer: str, payment: int, *, caller: str) -> MintReceipt:
        with self._op("mint") as now:
            return _mint(self._state, buyer, int(payment), caller=caller, now=now)

    def update_tier(self, index: int, price: int, start_date: int, *, caller: str) -> TierSnapshot:
        with self._op("update_tier") as now:
            snap = self._state.table.update_tier(index, int(price), int(start_date), caller=caller, now=now)
            self._state.events.emit(
                EventType.TIER_SCHEDULED, now, tier=index, price=snap.price, start_date=snap.start_date,
            )
            return snap

    def adjust_price(self, index: int, price: int, *, caller: str) -> TierSnapshot:
        with self._op("adjust_price") as now:
            snap = self._state.table.adjust_price(index, int(price), caller=caller, now=now)
            self._state.events.emit(EventType.PRICE_ADJUSTED, now, tier=index, price=snap.price)
            return snap

    def remediate_stalled(self, *, caller: str) -> List[int]:
        with self._op("remediate_stalled") as now:
            return _remediate(self._state, caller=caller, now=now)

    def set_royalty(self, receiver: str, basis_points: int, *, caller: str) -> RoyaltyConfig:
        with self._op("set_royalty") as now:
            cfg = self._state.royalty.set_royalty(receiver, int(basis_points), caller=caller)
            self._state.events.emit(
                EventType.ROYALTY_UPDATED, now, receiver=cfg.receiver, basis_points=cfg.basis_points,
            )
            log.info("collection: royalty set receiver=%s bps=%d", cfg.receiver, cfg.basis_points)
            return cfg

    def withdraw(self, amount: int, *, caller: str) -> Payout:
        with self._op("withdraw") as now:
            return self._paid_out(self._state.desk.withdraw(int(amount), caller=caller, now=now), now)

    def withdraw_all(self, *, caller: str) -> Payout:
        with self._op("withdraw_all") as now:
            return self._paid_out(self._state.desk.withdraw_all(caller=caller, now=now), now)

    def _paid_out(self, payout: Payout, now: int) -> Payout:
        self._state.events.emit(EventType.WITHDRAWN, now, to=payout.to, amount=payout.amount)
        metrics.WITHDRAWALS.inc()
        metrics.WITHDRAWN_AMOUNT.inc(payout.amount)
        log.info("collection: withdrew %d, balance now %d", payout.amount, payout.balance_after)
        return payout

    def record_transfer(self, token_id: int, new_holder: str) -> None:
        """
        Mirror a transfer the token standard has already committed. Authorization
        (approve/transferFrom) is not checked here.
        """
        if not new_holder:
            raise ValueError("new_holder must be a non-empty address")
        with self._op("record_transfer") as now:
            previous, _ = self._state.ledger.owners.move(int(token_id), new_holder)
            if previous != new_holder:
                self._state.events.emit(
                    EventType.TRANSFERRED, now, token_id=int(token_id), frm=previous, to=new_holder,
                )

    def transfer_ownership(self, new_owner: str, *, caller: str) -> None:
        with self._op("transfer_ownership") as now:
            previous = self._state.access.transfer_ownership(new_owner, caller=caller)
            self._state.events.emit(EventType.OWNERSHIP_TRANSFERRED, now, previous=previous, new=new_owner)
            log.info("collection: ownership %s -> %s", previous, new_owner)


__all__ = ["DropCollection"]
