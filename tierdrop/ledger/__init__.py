from __future__ import annotations
"""
tierdrop.ledger
===============

Supply counters and the ownership index. Pure in-memory structures with no
knowledge of prices or time; the coordinator in `tierdrop.collection` owns
the single instance and hands it to mint/remediation explicitly.
"""

from .ownership import OwnershipIndex
from .supply import SupplyLedger

__all__ = ["OwnershipIndex", "SupplyLedger"]
