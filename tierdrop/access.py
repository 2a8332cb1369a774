from __future__ import annotations
"""
tierdrop.access
===============

Minimal **Ownable** helper for the drop.

- read the current owner (`owner`)
- check that a caller is the owner (`require_owner`)
- transfer ownership to a new account (`transfer_ownership`)

Addresses are opaque, non-empty strings compared exactly; callers should
normalize them consistently (e.g. lower-case hex) before they reach here.
"""

from tierdrop.errors import Unauthorized


class Ownable:
    __slots__ = ("_owner",)

    def __init__(self, owner: str) -> None:
        if not owner:
            raise ValueError("owner must be a non-empty address")
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, caller: str) -> bool:
        return bool(caller) and caller == self._owner

    def require_owner(self, caller: str) -> None:
        """Raise `Unauthorized` unless `caller` equals the current owner."""
        if not self.is_owner(caller):
            raise Unauthorized(caller=caller, message="caller is not the owner")

    def transfer_ownership(self, new_owner: str, *, caller: str) -> str:
        """Owner-only: hand the owner role to `new_owner`; returns the previous owner."""
        self.require_owner(caller)
        if not new_owner:
            raise ValueError("new_owner must be a non-empty address")
        previous, self._owner = self._owner, new_owner
        return previous


__all__ = ["Ownable"]
