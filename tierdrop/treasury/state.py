from __future__ import annotations

"""
Drop treasury: pooled balance
------------------------------

Holds the payments collected by minting until the owner withdraws them.

Amounts are integer *base units* (no floats). Invariant, checked by `check`:
    balance == total_received - total_withdrawn  and  balance >= 0

Every credit and debit is journaled with the balance after the operation, so
the history can be audited without replaying mints.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Literal, Tuple

from tierdrop.errors import InsufficientFunds, LedgerInvariantError

Amount = int
OpName = Literal["credit", "debit"]


@dataclass(frozen=True)
class JournalEntry:
    seq: int
    op: OpName
    amount: Amount
    ts: int
    balance_after: Amount
    meta: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


class TreasuryState:
    def __init__(self) -> None:
        self._balance: Amount = 0
        self._received: Amount = 0
        self._withdrawn: Amount = 0
        self._journal: List[JournalEntry] = []

    # --- introspection ---

    @property
    def balance(self) -> Amount:
        return self._balance

    def totals(self) -> Tuple[Amount, Amount]:
        """Return (total_received, total_withdrawn)."""
        return self._received, self._withdrawn

    def journal(self) -> Tuple[JournalEntry, ...]:
        return tuple(self._journal)

    def check(self) -> None:
        if self._balance < 0 or self._balance != self._received - self._withdrawn:
            raise LedgerInvariantError(
                "treasury balance disagrees with journal totals",
                details={"balance": self._balance, "received": self._received, "withdrawn": self._withdrawn},
            )

    # --- mutations ---

    def credit(self, amount: Amount, *, ts: int, reason: str = "mint") -> JournalEntry:
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative, got {amount}")
        self._balance += amount
        self._received += amount
        return self._record("credit", amount, ts, reason)

    def debit(self, amount: Amount, *, ts: int, reason: str = "withdraw") -> JournalEntry:
        if amount < 0 or amount > self._balance:
            raise InsufficientFunds(requested=amount, available=self._balance)
        self._balance -= amount
        self._withdrawn += amount
        return self._record("debit", amount, ts, reason)

    def _record(self, op: OpName, amount: Amount, ts: int, reason: str) -> JournalEntry:
        entry = JournalEntry(
            seq=len(self._journal) + 1,
            op=op,
            amount=amount,
            ts=int(ts),
            balance_after=self._balance,
            meta={"reason": reason},
        )
        self._journal.append(entry)
        return entry


__all__ = ["Amount", "JournalEntry", "TreasuryState"]
