from __future__ import annotations

"""
Ownership index: holder -> ordered token ids, token id -> holder.

Order per holder is acquisition order (mint, then any transfers in), which
keeps `token_ids_of` stable and reproducible for a given sequence of
operations. Transfers themselves are authorized by the token standard; this
index only mirrors the committed result via `move`.
"""

from typing import Dict, List, Tuple

from tierdrop.errors import LedgerInvariantError, UnknownToken


class OwnershipIndex:
    def __init__(self) -> None:
        self._owner_of: Dict[int, str] = {}
        self._held: Dict[str, List[int]] = {}

    def __len__(self) -> int:
        return len(self._owner_of)

    def __contains__(self, token_id: int) -> bool:
        return token_id in self._owner_of

    def assign(self, token_id: int, holder: str) -> None:
        """Record a freshly minted token. Each id may be assigned exactly once."""
        if token_id in self._owner_of:
            raise LedgerInvariantError(
                "token already assigned",
                details={"token_id": token_id, "holder": self._owner_of[token_id]},
            )
        self._owner_of[token_id] = holder
        self._held.setdefault(holder, []).append(token_id)

    def move(self, token_id: int, new_holder: str) -> Tuple[str, str]:
        """Mirror a committed transfer; returns (previous, new)."""
        previous = self.owner_of(token_id)
        if previous == new_holder:
            return previous, new_holder
        held = self._held[previous]
        held.remove(token_id)
        if not held:
            del self._held[previous]
        self._owner_of[token_id] = new_holder
        self._held.setdefault(new_holder, []).append(token_id)
        return previous, new_holder

    def owner_of(self, token_id: int) -> str:
        try:
            return self._owner_of[token_id]
        except KeyError:
            raise UnknownToken(token_id=token_id) from None

    def balance_of(self, holder: str) -> int:
        return len(self._held.get(holder, ()))

    def token_ids_of(self, holder: str) -> List[int]:
        return list(self._held.get(holder, ()))

    def holders(self) -> List[str]:
        return list(self._held.keys())

    def check(self) -> None:
        counted = sum(len(ids) for ids in self._held.values())
        if counted != len(self._owner_of):
            raise LedgerInvariantError(
                "holder sets disagree with owner map",
                details={"held": counted, "owned": len(self._owner_of)},
            )
        for holder, ids in self._held.items():
            for tid in ids:
                if self._owner_of.get(tid) != holder:
                    raise LedgerInvariantError(
                        "token listed under the wrong holder",
                        details={"token_id": tid, "holder": holder},
                    )


__all__ = ["OwnershipIndex"]
