from __future__ import annotations

import pytest

from tierdrop.config import HOUR
from tierdrop.dtypes.tier import TierState
from tierdrop.errors import (AlreadyInitialized, InsufficientPayment,
                             NoActiveDrop, Unauthorized)

PRICE = 10**16


def test_initialize_mints_reserve_and_opens_first_tier(make_drop, owner, alice):
    drop = make_drop(initialize=False)
    assert drop.total_minted() == 0
    assert drop.status().active is False
    with pytest.raises(NoActiveDrop):
        drop.mint(alice, PRICE, caller=alice)
    with pytest.raises(Unauthorized):
        drop.initialize(caller=alice)

    assert drop.initialize(caller=owner) == [0, 1, 2, 3]
    assert drop.balance_of(owner) == 4
    assert drop.total_minted() == 4
    st = drop.status()
    assert (st.current_index, st.active, st.complete) == (0, True, False)
    assert [t.tokens_allocated for t in drop.drops()] == [5, 5, 5, 5]
    assert drop.drops()[0].price == PRICE

    n_events = len(drop.events())
    with pytest.raises(AlreadyInitialized):
        drop.initialize(caller=owner)
    assert drop.total_minted() == 4
    assert drop.token_ids_of(owner) == [0, 1, 2, 3]
    assert len(drop.events()) == n_events


def test_mint_returns_next_global_id(drop, clock, alice, bob):
    receipt = drop.mint_with_receipt(alice, PRICE, caller=alice)
    assert (receipt.token_id, receipt.tier, receipt.price, receipt.ts) == (4, 0, PRICE, clock.now)
    assert drop.mint(bob, PRICE, caller=bob) == 5
    assert drop.owner_of(4) == alice
    assert drop.token_ids_of(bob) == [5]
    assert drop.drops()[0].tokens_minted == 2


def test_mint_is_self_service(drop, alice, bob):
    with pytest.raises(Unauthorized):
        drop.mint(alice, PRICE, caller=bob)
    assert drop.balance_of(alice) == 0


def test_insufficient_payment_changes_nothing(drop, alice):
    with pytest.raises(InsufficientPayment) as ei:
        drop.mint(alice, PRICE - 1, caller=alice)
    assert ei.value.details == {"required": PRICE, "sent": PRICE - 1}
    with pytest.raises(InsufficientPayment):
        drop.mint(alice, -1, caller=alice)
    assert drop.total_minted() == 4
    assert drop.treasury_balance() == 0


def test_overpayment_is_retained(drop, alice):
    drop.mint(alice, 3 * PRICE, caller=alice)
    assert drop.treasury_balance() == 3 * PRICE


def test_sellout_then_no_active_drop(drop0, alice):
    # Scenario C: exactly N units sell, the next one finds no active tier
    for i in range(6):
        assert drop0.mint(alice, PRICE, caller=alice) == i
    assert drop0.tier_states()[0] is TierState.SOLD_OUT
    with pytest.raises(NoActiveDrop) as ei:
        drop0.mint(alice, PRICE, caller=alice)
    assert ei.value.details["current_index"] == 1
    assert drop0.total_minted() == 6
    assert drop0.treasury_balance() == 6 * PRICE


def test_next_tier_sells_once_due(drop0, clock, owner, alice):
    drop0.update_tier(1, 2 * PRICE, clock.now + 2 * HOUR, caller=owner)
    for _ in range(6):
        drop0.mint(alice, PRICE, caller=alice)
    with pytest.raises(NoActiveDrop):
        drop0.mint(alice, 2 * PRICE, caller=alice)

    clock.advance(2 * HOUR)
    st = drop0.status()
    assert (st.current_index, st.active) == (1, True)
    with pytest.raises(InsufficientPayment):
        drop0.mint(alice, PRICE, caller=alice)
    receipt = drop0.mint_with_receipt(alice, 2 * PRICE, caller=alice)
    assert (receipt.token_id, receipt.tier) == (6, 1)


def test_last_tier_carries_remainder(make_drop, alice):
    drop = make_drop(total=27, reserve=0)
    assert [t.tokens_allocated for t in drop.drops()] == [6, 6, 6, 9]
    assert drop.tokens_per_tier() == 6
