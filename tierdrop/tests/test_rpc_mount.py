from __future__ import annotations

from typing import Any, Callable, Dict

import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tierdrop.errors import DropError, InvalidRate
from tierdrop.rpc import RPC_PREFIX
from tierdrop.rpc.methods import make_methods
from tierdrop.rpc.mount import mount_drop, register_jsonrpc

PRICE = 10**16


@pytest.fixture
def client(drop) -> TestClient:
    app = FastAPI(title="tierdrop test")
    mount_drop(app, drop, with_metrics=True)
    return TestClient(app)


def test_status_and_drops(client):
    r = client.get(f"{RPC_PREFIX}/status")
    assert r.status_code == 200
    body = r.json()
    assert (body["current_index"], body["active"], body["complete"]) == (0, True, False)

    r = client.get(f"{RPC_PREFIX}/drops")
    assert [t["tokens_allocated"] for t in r.json()["items"]] == [5, 5, 5, 5]

    r = client.get(f"{RPC_PREFIX}/supply")
    assert r.json() == {"totalSupply": 24, "totalMinted": 4, "unminted": 20, "tokensPerTier": 5}


def test_mint_and_holder_queries(client, alice):
    r = client.post(f"{RPC_PREFIX}/mint", json={"buyer": alice, "payment": PRICE, "caller": alice})
    assert r.status_code == 200
    assert r.json()["tokenId"] == 4

    assert client.get(f"{RPC_PREFIX}/holders/{alice}/balance").json()["balance"] == 1
    assert client.get(f"{RPC_PREFIX}/holders/{alice}/tokens").json()["tokenIds"] == [4]
    assert client.get(f"{RPC_PREFIX}/tokens/4/owner").json()["owner"] == alice
    assert client.get(f"{RPC_PREFIX}/treasury").json()["balance"] == PRICE


def test_errors_map_to_http_status(client, owner, alice, bob):
    r = client.post(f"{RPC_PREFIX}/mint", json={"buyer": alice, "payment": PRICE, "caller": bob})
    assert r.status_code == 403
    assert r.json()["detail"]["code"] == "DROP_UNAUTHORIZED"

    r = client.post(f"{RPC_PREFIX}/mint", json={"buyer": alice, "payment": 1, "caller": alice})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "DROP_INSUFFICIENT_PAYMENT"

    r = client.post(f"{RPC_PREFIX}/remediate", json={"caller": owner})
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "DROP_NOT_STALLED"

    r = client.put(f"{RPC_PREFIX}/royalty", json={"receiver": owner, "basisPoints": 401, "caller": owner})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "DROP_INVALID_RATE"

    assert client.get(f"{RPC_PREFIX}/tokens/20/owner").status_code == 404
    r = client.post(f"{RPC_PREFIX}/treasury/withdraw", json={"amount": 5, "caller": owner})
    assert r.status_code == 409


def test_owner_endpoints(client, drop, owner, alice):
    client.post(f"{RPC_PREFIX}/mint", json={"buyer": alice, "payment": PRICE, "caller": alice})

    r = client.put(f"{RPC_PREFIX}/royalty", json={"receiver": alice, "basisPoints": 400, "caller": owner})
    assert r.json() == {"receiver": alice, "basisPoints": 400}
    r = client.get(f"{RPC_PREFIX}/tokens/4/royalty", params={"salePrice": 1_000_000})
    assert r.json()["royaltyAmount"] == 40_000

    start = drop.status().as_of_time + 3 * 3600
    r = client.put(f"{RPC_PREFIX}/drops/1", json={"price": PRICE, "startDate": start, "caller": owner})
    assert r.status_code == 200
    assert r.json()["start_date"] == start

    r = client.post(f"{RPC_PREFIX}/drops/0/price", json={"price": 10**15, "caller": owner})
    assert r.json()["price"] == 10**15

    r = client.post(f"{RPC_PREFIX}/treasury/withdraw-all", json={"caller": owner})
    assert r.json()["amount"] == PRICE

    treasury = client.get(f"{RPC_PREFIX}/treasury").json()
    assert [(e["op"], e["amount"], e["meta"]["reason"]) for e in treasury["journal"]] == [
        ("credit", PRICE, "mint"),
        ("debit", PRICE, "withdraw_all"),
    ]
    assert treasury["journal"][-1]["balance_after"] == treasury["balance"] == 0
    assert [p["amount"] for p in treasury["payouts"]] == [PRICE]

    items = client.get(f"{RPC_PREFIX}/events", params={"since": 5}).json()["items"]
    assert [e["etype"] for e in items] == [
        "Minted", "RoyaltyUpdated", "TierScheduled", "PriceAdjusted", "Withdrawn",
    ]


def test_metrics_mounted(client):
    r = client.get(f"{RPC_PREFIX}/metrics/")
    assert r.status_code == 200
    assert "tierdrop_unminted_tokens" in r.text


class _AddDispatcher:
    def __init__(self) -> None:
        self.methods: Dict[str, Callable[..., Any]] = {}

    def add(self, method: str, func: Callable[..., Any]) -> None:
        self.methods[method] = func


class _RegisterDispatcher:
    def __init__(self) -> None:
        self.methods: Dict[str, Callable[..., Any]] = {}

    def register(self, method: str, func: Callable[..., Any]) -> None:
        self.methods[method] = func


def test_register_jsonrpc(drop, alice):
    for disp in (_AddDispatcher(), _RegisterDispatcher()):
        register_jsonrpc(disp, drop)
        assert set(disp.methods) == set(make_methods(drop))

    methods = make_methods(drop)
    out = methods["drop.mint"](buyer=alice, payment=PRICE, caller=alice)
    assert (out["tokenId"], out["tier"]) == (4, 0)
    assert methods["drop.supply"]()["totalMinted"] == 5
    assert methods["drop.royaltyInfo"](tokenId=4, salePrice=10_000)["royaltyAmount"] == 250


def test_set_royalty_coerces_basis_points(drop, owner):
    methods = make_methods(drop)
    assert methods["drop.setRoyalty"](receiver=owner, basisPoints="300", caller=owner)["basisPoints"] == 300

    with pytest.raises(DropError) as ei:
        methods["drop.setRoyalty"](receiver=owner, basisPoints="abc", caller=owner)
    assert not isinstance(ei.value, InvalidRate)
    with pytest.raises(DropError):
        methods["drop.setRoyalty"](receiver=owner, basisPoints=None, caller=owner)
    with pytest.raises(InvalidRate):
        methods["drop.setRoyalty"](receiver=owner, basisPoints=-1, caller=owner)
    assert drop.royalty_config().basis_points == 300
