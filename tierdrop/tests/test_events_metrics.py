from __future__ import annotations

import pytest

from tierdrop import metrics
from tierdrop.dtypes.events import EventType
from tierdrop.errors import InsufficientPayment, NoActiveDrop

PRICE = 10**16


def _sample(name: str, **labels: str) -> float:
    return metrics.REGISTRY.get_sample_value(name, labels or None) or 0.0


def test_initialize_and_mint_events(drop, clock, owner, alice):
    evs = drop.events()
    assert [e.etype for e in evs] == [EventType.MINTED] * 4 + [EventType.INITIALIZED]
    assert [e.seq for e in evs] == [1, 2, 3, 4, 5]
    assert {e.args["source"] for e in evs[:4]} == {"reserve"}
    assert evs[-1].args == {"reserve": [0, 1, 2, 3], "opening_price": PRICE}

    tid = drop.mint(alice, PRICE, caller=alice)
    ev = drop.events(since=5)[0]
    assert ev.etype is EventType.MINTED
    assert ev.ts == clock.now
    assert ev.args == {
        "token_id": tid,
        "to": alice,
        "tier": 0,
        "price": PRICE,
        "paid": PRICE,
        "source": "sale",
    }
    assert ev.to_dict()["etype"] == "Minted"


def test_failed_operations_emit_nothing(drop, alice):
    n = len(drop.events())
    with pytest.raises(InsufficientPayment):
        drop.mint(alice, 1, caller=alice)
    assert len(drop.events()) == n


def test_counters_track_operations(make_drop, owner, alice):
    sold = _sample("tierdrop_tokens_minted_total", source="sale", tier="0")
    paid = _sample("tierdrop_payments_received_base_units_total")
    rejected = _sample("tierdrop_rejected_operations_total", op="mint", code=NoActiveDrop.code)

    drop = make_drop(initialize=False)
    with pytest.raises(NoActiveDrop):
        drop.mint(alice, PRICE, caller=alice)
    drop.initialize(caller=owner)
    drop.mint(alice, PRICE, caller=alice)

    assert _sample("tierdrop_tokens_minted_total", source="sale", tier="0") == sold + 1
    assert _sample("tierdrop_payments_received_base_units_total") == paid + PRICE
    assert _sample("tierdrop_rejected_operations_total", op="mint", code=NoActiveDrop.code) == rejected + 1
    assert _sample("tierdrop_unminted_tokens") == drop.unminted()
    assert _sample("tierdrop_current_tier_index") == 0


def test_render_latest():
    payload, ctype = metrics.render_latest()
    assert b"tierdrop_unminted_tokens" in payload
    assert ctype.startswith("text/plain")
