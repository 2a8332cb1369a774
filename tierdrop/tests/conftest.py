from __future__ import annotations

from typing import Callable

import pytest

from tierdrop.clock import ManualClock
from tierdrop.collection import DropCollection
from tierdrop.config import DropConfig, SupplyConfig
from tierdrop.tests import T0, det_address


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def owner() -> str:
    return det_address("owner")


@pytest.fixture
def alice() -> str:
    return det_address("alice")


@pytest.fixture
def bob() -> str:
    return det_address("bob")


@pytest.fixture
def make_drop(clock: ManualClock, owner: str) -> Callable[..., DropCollection]:
    """Factory for collections sharing the test clock; `reserve` sets the owner premint."""

    def _make(*, reserve: int = 4, total: int = 24, initialize: bool = True) -> DropCollection:
        cfg = DropConfig(supply=SupplyConfig(total_supply=total, reserve_owner=reserve))
        drop = DropCollection(owner, config=cfg, clock=clock)
        if initialize:
            drop.initialize(caller=owner)
        return drop

    return _make


@pytest.fixture
def drop(make_drop) -> DropCollection:
    """Initialized collection: 24 units, 4 reserved to the owner, 5 per tier."""
    return make_drop()


@pytest.fixture
def drop0(make_drop) -> DropCollection:
    """Initialized collection with no reserve: 6 units per tier."""
    return make_drop(reserve=0)
