from __future__ import annotations

"""
tierdrop.state
--------------

`DropState` bundles every piece of mutable drop state into one handle: the
drop table, the supply ledger (with its ownership index), the treasury, the
royalty registry, the owner role and the event log.

Exactly one coordinator (`tierdrop.collection.DropCollection`) owns a
`DropState`; the mint and remediation operations receive it explicitly
instead of reaching for module globals.
"""

from dataclasses import dataclass

from tierdrop.access import Ownable
from tierdrop.config import DropConfig
from tierdrop.dtypes.events import EventLog
from tierdrop.ledger.supply import SupplyLedger
from tierdrop.royalty import RoyaltyRegistry
from tierdrop.schedule.scheduler import DropScheduler
from tierdrop.schedule.table import DropTable
from tierdrop.treasury.state import TreasuryState
from tierdrop.treasury.withdraw import WithdrawalDesk


@dataclass
class DropState:
    config: DropConfig
    access: Ownable
    table: DropTable
    scheduler: DropScheduler
    ledger: SupplyLedger
    treasury: TreasuryState
    desk: WithdrawalDesk
    royalty: RoyaltyRegistry
    events: EventLog
    initialized: bool = False

    @classmethod
    def build(cls, owner: str, config: DropConfig) -> "DropState":
        config.validate()
        access = Ownable(owner)
        table = DropTable(config.tier_allocations(), config.schedule, access)
        treasury = TreasuryState()
        return cls(
            config=config,
            access=access,
            table=table,
            scheduler=DropScheduler(table, config.schedule),
            ledger=SupplyLedger(config.supply.total_supply),
            treasury=treasury,
            desk=WithdrawalDesk(treasury, access),
            royalty=RoyaltyRegistry(owner, config.royalty.basis_points, access),
            events=EventLog(),
        )

    def check_invariants(self) -> None:
        self.ledger.check(self.table.tiers())
        self.treasury.check()


__all__ = ["DropState"]
