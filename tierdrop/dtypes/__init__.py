from __future__ import annotations
"""
Plain data types shared across the drop: tiers, derived status, events.
"""

from .events import DropEvent, EventLog, EventType, MintSource
from .status import DropStatus
from .tier import Tier, TierSnapshot, TierState

__all__ = [
    "DropEvent",
    "EventLog",
    "EventType",
    "MintSource",
    "DropStatus",
    "Tier",
    "TierSnapshot",
    "TierState",
]
