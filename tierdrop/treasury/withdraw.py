from __future__ import annotations

"""
Drop treasury: owner withdrawals
---------------------------------

Owner-only payouts out of the pooled balance. A withdrawal debits the
treasury immediately and records a `Payout` addressed to the owner's
external account; moving the funds on-chain (or through a custodian) is the
job of whatever reads `payouts()`.

  • withdraw(amount): fails with InsufficientFunds if amount > balance
  • withdraw_all():   empties the balance unconditionally (may pay out 0)
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Tuple

from tierdrop.access import Ownable
from tierdrop.treasury.state import TreasuryState


@dataclass(frozen=True)
class Payout:
    id: int
    to: str
    amount: int
    ts: int
    balance_after: int

    def to_dict(self) -> Dict:
        return asdict(self)


class WithdrawalDesk:
    """
    Usage:
      desk = WithdrawalDesk(treasury, access)
      payout = desk.withdraw(amount, caller=owner, now=now)
    """

    __slots__ = ("treasury", "_access", "_payouts")

    def __init__(self, treasury: TreasuryState, access: Ownable) -> None:
        self.treasury = treasury
        self._access = access
        self._payouts: List[Payout] = []

    def payouts(self) -> Tuple[Payout, ...]:
        return tuple(self._payouts)

    def withdraw(self, amount: int, *, caller: str, now: int) -> Payout:
        self._access.require_owner(caller)
        entry = self.treasury.debit(int(amount), ts=now, reason="withdraw")
        return self._pay(caller, entry.amount, now)

    def withdraw_all(self, *, caller: str, now: int) -> Payout:
        self._access.require_owner(caller)
        entry = self.treasury.debit(self.treasury.balance, ts=now, reason="withdraw_all")
        return self._pay(caller, entry.amount, now)

    def _pay(self, to: str, amount: int, now: int) -> Payout:
        p = Payout(
            id=len(self._payouts) + 1,
            to=to,
            amount=amount,
            ts=int(now),
            balance_after=self.treasury.balance,
        )
        self._payouts.append(p)
        return p


__all__ = ["Payout", "WithdrawalDesk"]
