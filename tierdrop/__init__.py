from __future__ import annotations
"""
tierdrop - time-gated, four-tier release of a fixed collection of numbered
items, with a supply ledger, advertised royalties and a pooled treasury.

The entry point is `tierdrop.collection.DropCollection`. Submodules are
lazily imported to keep import time minimal.

Public surface (lazily loaded):
- config, errors, metrics, clock
- collection, ledger, schedule, treasury, royalty
- rpc, cli
"""


from typing import List
import importlib

from .version import __version__

__all__: List[str] = [
    "__version__",
    # lazily importable subpackages/modules
    "access",
    "clock",
    "cli",
    "collection",
    "config",
    "dtypes",
    "errors",
    "ledger",
    "metrics",
    "mint",
    "remediation",
    "royalty",
    "rpc",
    "schedule",
    "state",
    "treasury",
]

_lazy_modules = set(__all__) - {"__version__"}


def __getattr__(name: str):
    if name in _lazy_modules:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(set(globals().keys()) | _lazy_modules)
