from __future__ import annotations
"""
tierdrop.schedule
=================

The drop table (stored tier fields and the rules for editing them) and the
scheduler that derives the current status from those tiers and a timestamp.
"""

from .scheduler import (DropScheduler, active_tier, compute_status, current_index,
                        stall_blockers, tier_states)
from .table import DropTable

__all__ = [
    "DropScheduler",
    "DropTable",
    "active_tier",
    "compute_status",
    "current_index",
    "stall_blockers",
    "tier_states",
]
