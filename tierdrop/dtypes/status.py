from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DropStatus:
    """
    Derived view of the schedule at one instant. Never stored.

    `current_index` is the lowest tier that is not sold out, or TIER_COUNT
    once every tier has sold out (then `complete` is True and `active` False).
    """
    current_index: int
    active: bool
    complete: bool
    as_of_time: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["DropStatus"]
