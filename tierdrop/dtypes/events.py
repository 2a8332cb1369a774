from __future__ import annotations
"""
Drop event records.

Every state-changing operation appends one or more events to the collection's
`EventLog`. Events are plain dataclasses with JSON-serializable fields, so the
RPC layer and the dev CLI can hand them out unchanged.

Events:
  - Initialized:          reserve minted and tier 0 opened.
  - Minted:               one token assigned (public sale, reserve or remediation).
  - TierScheduled:        price and start date set on a future tier.
  - PriceAdjusted:        live price change on an unsold tier.
  - StalledRemediated:    unsold units of a stalled tier minted to the owner.
  - RoyaltyUpdated:       receiver/rate changed.
  - Withdrawn:            treasury funds paid out to the owner.
  - Transferred:          ownership index updated from a token-standard transfer.
  - OwnershipTransferred: the administrative owner changed.

Timestamps are UNIX seconds taken from the operation's single clock read.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class EventType(str, Enum):
    INITIALIZED = "Initialized"
    MINTED = "Minted"
    TIER_SCHEDULED = "TierScheduled"
    PRICE_ADJUSTED = "PriceAdjusted"
    STALLED_REMEDIATED = "StalledRemediated"
    ROYALTY_UPDATED = "RoyaltyUpdated"
    WITHDRAWN = "Withdrawn"
    TRANSFERRED = "Transferred"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


class MintSource(str, Enum):
    SALE = "sale"
    RESERVE = "reserve"
    REMEDIATION = "remediation"


@dataclass(frozen=True)
class DropEvent:
    seq: int
    etype: EventType
    ts: int
    args: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["etype"] = self.etype.value
        return d


class EventLog:
    """
    Append-only, in-memory event journal with monotonically increasing `seq`.
    """

    def __init__(self) -> None:
        self._events: List[DropEvent] = []

    def emit(self, etype: EventType, ts: int, **args: Any) -> DropEvent:
        ev = DropEvent(seq=len(self._events) + 1, etype=etype, ts=int(ts), args=dict(args))
        self._events.append(ev)
        return ev

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[DropEvent]:
        return iter(tuple(self._events))

    def since(self, seq: int = 0, etype: Optional[EventType] = None) -> List[DropEvent]:
        return [
            e for e in self._events
            if e.seq > seq and (etype is None or e.etype == etype)
        ]


__all__ = ["EventType", "MintSource", "DropEvent", "EventLog"]
