from __future__ import annotations

"""
tierdrop.rpc.mount
------------------

Helpers to mount the drop surface into an existing FastAPI app and/or to
register the JSON-RPC methods with your dispatcher.

Typical usage (REST):
    from fastapi import FastAPI
    from tierdrop.rpc.mount import mount_drop
    app = FastAPI()
    mount_drop(app, collection, prefix="/drop", with_metrics=True)

Typical usage (JSON-RPC):
    from tierdrop.rpc.mount import register_jsonrpc
    register_jsonrpc(dispatcher, collection)
"""

from typing import Any, Protocol

from tierdrop.collection import DropCollection
from tierdrop.metrics import metrics_asgi_app

from . import DROP_OPENAPI_TAG, RPC_PREFIX
from .methods import build_rest_router, make_methods


class _JsonRpcDispatcherLike(Protocol):
    """Minimal protocol to support common JSON-RPC dispatchers."""
    def add(self, method: str, func: Any) -> None: ...
    def register(self, method: str, func: Any) -> None: ...


def mount_drop(
    app: Any,
    drop: DropCollection,
    *,
    prefix: str = RPC_PREFIX,
    with_metrics: bool = False,
) -> None:
    """
    Mount the drop REST endpoints under `prefix` on a FastAPI app, and
    optionally the Prometheus registry under `{prefix}/metrics`.
    """
    router = build_rest_router(drop)
    app.include_router(router, prefix=prefix, tags=[DROP_OPENAPI_TAG["name"]])
    if with_metrics:
        app.mount(f"{prefix}/metrics", metrics_asgi_app())


def register_jsonrpc(dispatcher: _JsonRpcDispatcherLike, drop: DropCollection) -> None:
    """
    Register JSON-RPC methods on a dispatcher, preferring `.add(name, fn)` and
    falling back to `.register(name, fn)`.
    """
    for name, fn in make_methods(drop).items():
        try:
            dispatcher.add(name, fn)  # type: ignore[attr-defined]
        except AttributeError:
            dispatcher.register(name, fn)  # type: ignore[attr-defined]


__all__ = ["mount_drop", "register_jsonrpc"]
