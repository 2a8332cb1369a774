from __future__ import annotations
"""
tierdrop.treasury
=================

Pooled mint proceeds (`state`) and owner payouts out of them (`withdraw`).
Integer base units throughout; no floats.
"""

from .state import JournalEntry, TreasuryState
from .withdraw import Payout, WithdrawalDesk

__all__ = ["JournalEntry", "TreasuryState", "Payout", "WithdrawalDesk"]
