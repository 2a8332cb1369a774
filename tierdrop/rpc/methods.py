from __future__ import annotations

"""
tierdrop.rpc.methods
--------------------

JSON-RPC style method implementations for a tiered drop.

Exposed methods (bind via `make_methods`):
  • drop.status          • drop.getDrops        • drop.supply
  • drop.balanceOf       • drop.tokensOf        • drop.ownerOf
  • drop.royaltyInfo     • drop.treasury        • drop.events
  • drop.initialize      • drop.mint            • drop.updateTier
  • drop.adjustPrice     • drop.remediateStalled
  • drop.setRoyalty      • drop.withdraw        • drop.withdrawAll

Design:
  - Transport-agnostic: `make_methods` returns a dict of callables a JSON-RPC
    dispatcher can register; `build_rest_router` exposes the same callables
    through FastAPI.
  - The caller identity arrives as a `caller` parameter. Authenticating it
    (signatures, sessions) belongs to the transport in front of this module.
  - Domain errors propagate as `DropError`; the REST adapter maps them to
    HTTP status codes with the error's `to_dict()` as detail.
"""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field

from tierdrop.collection import DropCollection
from tierdrop.errors import (AlreadyInitialized, DropError, InsufficientFunds,
                             InvalidTransition, NoActiveDrop, NotStalled,
                             Unauthorized, UnknownToken)


def _coerce_int(value: Any, name: str) -> int:
    try:
        iv = int(value)
        if iv < 0:
            raise ValueError
        return iv
    except (TypeError, ValueError) as e:
        raise DropError(f"invalid {name}: must be a non-negative integer") from e


def _coerce_signed_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DropError(f"invalid {name}: must be an integer") from e


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise DropError(f"{name} is required")
    return value


# ---- JSON-RPC method factory ----------------------------------------------

def make_methods(drop: DropCollection) -> Dict[str, Callable[..., Any]]:
    """
    Build a mapping of JSON-RPC method name -> callable.
    Each callable returns plain JSON-serializable structures.
    """

    def drop_status() -> Dict[str, Any]:
        return drop.status().to_dict()

    def drop_get_drops() -> Dict[str, Any]:
        return {"items": [t.to_dict() for t in drop.drops()]}

    def drop_supply() -> Dict[str, Any]:
        return {
            "totalSupply": drop.total_supply(),
            "totalMinted": drop.total_minted(),
            "unminted": drop.unminted(),
            "tokensPerTier": drop.tokens_per_tier(),
        }

    def drop_balance_of(*, holder: str) -> Dict[str, Any]:
        h = _require(holder, "holder")
        return {"holder": h, "balance": drop.balance_of(h)}

    def drop_tokens_of(*, holder: str) -> Dict[str, Any]:
        h = _require(holder, "holder")
        return {"holder": h, "tokenIds": drop.token_ids_of(h)}

    def drop_owner_of(*, tokenId: int) -> Dict[str, Any]:
        tid = _coerce_int(tokenId, "tokenId")
        return {"tokenId": tid, "owner": drop.owner_of(tid)}

    def drop_royalty_info(*, tokenId: int, salePrice: int) -> Dict[str, Any]:
        tid = _coerce_int(tokenId, "tokenId")
        price = _coerce_int(salePrice, "salePrice")
        cfg = drop.royalty_config()
        return {
            "receiver": cfg.receiver,
            "basisPoints": cfg.basis_points,
            "royaltyAmount": drop.royalty_info(tid, price),
        }

    def drop_treasury() -> Dict[str, Any]:
        return {
            "balance": drop.treasury_balance(),
            "payouts": [p.to_dict() for p in drop.payouts()],
            "journal": [e.to_dict() for e in drop.treasury_journal()],
        }

    def drop_events(*, since: Optional[int] = 0) -> Dict[str, Any]:
        s = _coerce_int(since or 0, "since")
        items = [e.to_dict() for e in drop.events(since=s)]
        return {"items": items, "nextSeq": items[-1]["seq"] if items else s}

    def drop_initialize(*, caller: str) -> Dict[str, Any]:
        return {"reserve": drop.initialize(caller=_require(caller, "caller"))}

    def drop_mint(*, buyer: str, payment: int, caller: str) -> Dict[str, Any]:
        receipt = drop.mint_with_receipt(
            _require(buyer, "buyer"), _coerce_int(payment, "payment"), caller=_require(caller, "caller")
        )
        return {
            "tokenId": receipt.token_id,
            "tier": receipt.tier,
            "price": receipt.price,
            "paid": receipt.paid,
        }

    def drop_update_tier(*, index: int, price: int, startDate: int, caller: str) -> Dict[str, Any]:
        snap = drop.update_tier(
            _coerce_int(index, "index"),
            _coerce_int(price, "price"),
            _coerce_int(startDate, "startDate"),
            caller=_require(caller, "caller"),
        )
        return snap.to_dict()

    def drop_adjust_price(*, index: int, price: int, caller: str) -> Dict[str, Any]:
        snap = drop.adjust_price(
            _coerce_int(index, "index"), _coerce_int(price, "price"), caller=_require(caller, "caller")
        )
        return snap.to_dict()

    def drop_remediate_stalled(*, caller: str) -> Dict[str, Any]:
        return {"tokenIds": drop.remediate_stalled(caller=_require(caller, "caller"))}

    def drop_set_royalty(*, receiver: str, basisPoints: int, caller: str) -> Dict[str, Any]:
        cfg = drop.set_royalty(
            _require(receiver, "receiver"),
            _coerce_signed_int(basisPoints, "basisPoints"),
            caller=_require(caller, "caller"),
        )
        return {"receiver": cfg.receiver, "basisPoints": cfg.basis_points}

    def drop_withdraw(*, amount: int, caller: str) -> Dict[str, Any]:
        return drop.withdraw(_coerce_int(amount, "amount"), caller=_require(caller, "caller")).to_dict()

    def drop_withdraw_all(*, caller: str) -> Dict[str, Any]:
        return drop.withdraw_all(caller=_require(caller, "caller")).to_dict()

    return {
        "drop.status": drop_status,
        "drop.getDrops": drop_get_drops,
        "drop.supply": drop_supply,
        "drop.balanceOf": drop_balance_of,
        "drop.tokensOf": drop_tokens_of,
        "drop.ownerOf": drop_owner_of,
        "drop.royaltyInfo": drop_royalty_info,
        "drop.treasury": drop_treasury,
        "drop.events": drop_events,
        "drop.initialize": drop_initialize,
        "drop.mint": drop_mint,
        "drop.updateTier": drop_update_tier,
        "drop.adjustPrice": drop_adjust_price,
        "drop.remediateStalled": drop_remediate_stalled,
        "drop.setRoyalty": drop_set_royalty,
        "drop.withdraw": drop_withdraw,
        "drop.withdrawAll": drop_withdraw_all,
    }


# ---- REST adapter (FastAPI) ------------------------------------------------

class CallerBody(BaseModel):
    caller: str


class MintBody(BaseModel):
    buyer: str
    payment: int = Field(ge=0)
    caller: str


class UpdateTierBody(BaseModel):
    price: int = Field(ge=0)
    startDate: int = Field(ge=0)
    caller: str


class AdjustPriceBody(BaseModel):
    price: int = Field(ge=0)
    caller: str


class RoyaltyBody(BaseModel):
    receiver: str
    basisPoints: int
    caller: str


class WithdrawBody(BaseModel):
    amount: int = Field(ge=0)
    caller: str


def http_status_for(err: Exception) -> int:
    if isinstance(err, Unauthorized):
        return 403
    if isinstance(err, UnknownToken):
        return 404
    if isinstance(err, (AlreadyInitialized, NoActiveDrop, InvalidTransition, NotStalled, InsufficientFunds)):
        return 409
    return 400


def build_rest_router(drop: DropCollection):
    """
    Return a FastAPI APIRouter exposing the drop's query and mutating surface.
    Mount path suggestion: RPC_PREFIX (import from tierdrop.rpc).
    """
    from fastapi import APIRouter, HTTPException, Query

    router = APIRouter()
    methods = make_methods(drop)

    def call(name: str, **kwargs: Any) -> Any:
        try:
            return methods[name](**kwargs)
        except DropError as e:
            raise HTTPException(status_code=http_status_for(e), detail=e.to_dict()) from e
        except ValueError as e:
            raise HTTPException(status_code=400, detail={"code": "BAD_REQUEST", "message": str(e)}) from e

    @router.get("/status")
    def http_status():
        return call("drop.status")

    @router.get("/drops")
    def http_drops():
        return call("drop.getDrops")

    @router.get("/supply")
    def http_supply():
        return call("drop.supply")

    @router.get("/holders/{holder}/balance")
    def http_balance(holder: str):
        return call("drop.balanceOf", holder=holder)

    @router.get("/holders/{holder}/tokens")
    def http_tokens(holder: str):
        return call("drop.tokensOf", holder=holder)

    @router.get("/tokens/{token_id}/owner")
    def http_owner_of(token_id: int):
        return call("drop.ownerOf", tokenId=token_id)

    @router.get("/tokens/{token_id}/royalty")
    def http_royalty(token_id: int, salePrice: int = Query(..., ge=0)):
        return call("drop.royaltyInfo", tokenId=token_id, salePrice=salePrice)

    @router.get("/treasury")
    def http_treasury():
        return call("drop.treasury")

    @router.get("/events")
    def http_events(since: int = Query(0, ge=0)):
        return call("drop.events", since=since)

    @router.post("/initialize")
    def http_initialize(body: CallerBody):
        return call("drop.initialize", caller=body.caller)

    @router.post("/mint")
    def http_mint(body: MintBody):
        return call("drop.mint", buyer=body.buyer, payment=body.payment, caller=body.caller)

    @router.put("/drops/{index}")
    def http_update_tier(index: int, body: UpdateTierBody):
        return call("drop.updateTier", index=index, price=body.price, startDate=body.startDate, caller=body.caller)

    @router.post("/drops/{index}/price")
    def http_adjust_price(index: int, body: AdjustPriceBody):
        return call("drop.adjustPrice", index=index, price=body.price, caller=body.caller)

    @router.post("/remediate")
    def http_remediate(body: CallerBody):
        return call("drop.remediateStalled", caller=body.caller)

    @router.put("/royalty")
    def http_set_royalty(body: RoyaltyBody):
        return call("drop.setRoyalty", receiver=body.receiver, basisPoints=body.basisPoints, caller=body.caller)

    @router.post("/treasury/withdraw")
    def http_withdraw(body: WithdrawBody):
        return call("drop.withdraw", amount=body.amount, caller=body.caller)

    @router.post("/treasury/withdraw-all")
    def http_withdraw_all(body: CallerBody):
        return call("drop.withdrawAll", caller=body.caller)

    return router


__all__ = [
    "make_methods",
    "build_rest_router",
    "http_status_for",
    "CallerBody",
    "MintBody",
    "UpdateTierBody",
    "AdjustPriceBody",
    "RoyaltyBody",
    "WithdrawBody",
]
