from __future__ import annotations
# tierdrop/errors.py
"""
Error types for the tiered drop. Every failure is a local validation failure
detected before any mutation, so an error always means "nothing changed".

Errors are lightweight, serializable, and safe to surface over RPC/logs.

Exports:
- DropError (base)
- Unauthorized
- AlreadyInitialized
- NoActiveDrop
- InsufficientPayment
- InvalidTransition
- NotStalled
- InvalidRate
- InsufficientFunds
- UnknownToken
- LedgerInvariantError
"""


from typing import Any, Dict, Mapping, Optional
import json


class DropError(Exception):
    """Base class for drop domain errors."""

    code: str = "DROP_ERROR"

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            try:
                packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"))
            except Exception:
                packed = str(self.details)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


class Unauthorized(DropError):
    """Caller lacks the privilege the operation needs (owner, or self-service buyer)."""
    code = "DROP_UNAUTHORIZED"

    def __init__(
        self,
        *,
        caller: str,
        message: str = "caller is not authorized",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["caller"] = caller
        super().__init__(message, details=d)


class AlreadyInitialized(DropError):
    """`initialize` was called a second time."""
    code = "DROP_ALREADY_INITIALIZED"


class NoActiveDrop(DropError):
    """No tier is sellable right now; the caller may retry later."""
    code = "DROP_NO_ACTIVE"

    def __init__(
        self,
        *,
        current_index: int,
        as_of: int,
        message: str = "no active drop",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"current_index": int(current_index), "as_of": int(as_of)})
        super().__init__(message, details=d)


class InsufficientPayment(DropError):
    """Payment is below the active tier's price."""
    code = "DROP_INSUFFICIENT_PAYMENT"

    def __init__(
        self,
        *,
        required: int,
        sent: int,
        message: str = "insufficient payment",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"required": int(required), "sent": int(sent)})
        super().__init__(message, details=d)


class InvalidTransition(DropError):
    """A tier edit violates the lead-time, ordering or freeze rules."""
    code = "DROP_INVALID_TRANSITION"

    def __init__(
        self,
        message: str = "invalid tier transition",
        *,
        index: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if index is not None:
            d.setdefault("index", int(index))
        super().__init__(message, details=d)


class NotStalled(DropError):
    """Remediation preconditions are not met for the current tier."""
    code = "DROP_NOT_STALLED"

    def __init__(
        self,
        message: str = "current drop is not stalled",
        *,
        index: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if index is not None:
            d.setdefault("index", int(index))
        super().__init__(message, details=d)


class InvalidRate(DropError):
    """Royalty basis points outside [0, MAX_ROYALTY_BPS]."""
    code = "DROP_INVALID_RATE"

    def __init__(
        self,
        *,
        basis_points: int,
        maximum: int,
        message: str = "royalty rate out of range",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"basis_points": int(basis_points), "maximum": int(maximum)})
        super().__init__(message, details=d)


class InsufficientFunds(DropError):
    """Withdrawal exceeds the pooled treasury balance."""
    code = "DROP_INSUFFICIENT_FUNDS"

    def __init__(
        self,
        *,
        requested: int,
        available: int,
        message: str = "insufficient treasury funds",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"requested": int(requested), "available": int(available)})
        super().__init__(message, details=d)


class UnknownToken(DropError):
    """Token id has not been minted (or lies outside the supply range)."""
    code = "DROP_UNKNOWN_TOKEN"

    def __init__(
        self,
        *,
        token_id: int,
        message: str = "unknown token",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["token_id"] = int(token_id)
        super().__init__(message, details=d)


class LedgerInvariantError(DropError):
    """A supply/ownership invariant failed; indicates a bug, never user input."""
    code = "DROP_LEDGER_INVARIANT"


__all__ = [
    "DropError",
    "Unauthorized",
    "AlreadyInitialized",
    "NoActiveDrop",
    "InsufficientPayment",
    "InvalidTransition",
    "NotStalled",
    "InvalidRate",
    "InsufficientFunds",
    "UnknownToken",
    "LedgerInvariantError",
]
