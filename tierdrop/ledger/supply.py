from __future__ import annotations

"""
Supply ledger
-------------

Owns the collection's counters and the ownership index:
  • total_supply (constant), total_minted (monotonic), unminted (derived)
  • reserve_minted: units minted at initialization, outside every tier
  • next token id: a single global counter, ids are the dense range
    [0, total_supply), independent of which tier a sale belongs to

The ledger does not know about prices or dates. Callers validate first and
then call `mint_to`; running past the supply here is a bug and raises
`LedgerInvariantError`.

Invariants (see `check`):
  • total_supply == total_minted + unminted
  • total_minted == reserve_minted + sum(tier.tokens_minted)
  • every minted id has exactly one holder
"""

from typing import Dict, Iterable, List

from tierdrop.dtypes.tier import Tier
from tierdrop.errors import LedgerInvariantError
from tierdrop.ledger.ownership import OwnershipIndex


class SupplyLedger:
    def __init__(self, total_supply: int) -> None:
        if total_supply <= 0:
            raise ValueError("total_supply must be positive")
        self._total_supply = int(total_supply)
        self._total_minted = 0
        self._reserve_minted = 0
        self.owners = OwnershipIndex()

    # --- introspection ---

    @property
    def total_supply(self) -> int:
        return self._total_supply

    @property
    def total_minted(self) -> int:
        return self._total_minted

    @property
    def reserve_minted(self) -> int:
        return self._reserve_minted

    @property
    def unminted(self) -> int:
        return self._total_supply - self._total_minted

    def snapshot(self) -> Dict[str, int]:
        return {
            "total_supply": self.total_supply,
            "total_minted": self.total_minted,
            "unminted": self.unminted,
            "reserve_minted": self.reserve_minted,
        }

    # --- mutations ---

    def mint_to(self, holder: str, *, reserve: bool = False) -> int:
        """Allocate the next token id to `holder` and return it."""
        if self.unminted <= 0:
            raise LedgerInvariantError(
                "supply exhausted", details={"total_supply": self._total_supply}
            )
        token_id = self._total_minted
        self.owners.assign(token_id, holder)
        self._total_minted += 1
        if reserve:
            self._reserve_minted += 1
        return token_id

    def mint_many(self, holder: str, count: int, *, reserve: bool = False) -> List[int]:
        if count < 0:
            raise ValueError("count must be >= 0")
        if count > self.unminted:
            raise LedgerInvariantError(
                "supply exhausted",
                details={"requested": count, "unminted": self.unminted},
            )
        return [self.mint_to(holder, reserve=reserve) for _ in range(count)]

    # --- invariants ---

    def check(self, tiers: Iterable[Tier]) -> None:
        tier_minted = 0
        for t in tiers:
            if t.tokens_minted > t.tokens_allocated:
                raise LedgerInvariantError(
                    "tier over-minted",
                    details={"index": t.index, "minted": t.tokens_minted, "allocated": t.tokens_allocated},
                )
            tier_minted += t.tokens_minted
        if self._total_minted + self.unminted != self._total_supply:
            raise LedgerInvariantError("minted + unminted != total_supply", details=self.snapshot())
        if self._total_minted != self._reserve_minted + tier_minted:
            raise LedgerInvariantError(
                "total_minted disagrees with tier counters",
                details={**self.snapshot(), "tier_minted": tier_minted},
            )
        if len(self.owners) != self._total_minted:
            raise LedgerInvariantError(
                "ownership index disagrees with total_minted",
                details={"owned": len(self.owners), "total_minted": self._total_minted},
            )
        self.owners.check()


__all__ = ["SupplyLedger"]
