from __future__ import annotations

"""
tierdrop.rpc
------------

Package marker and lightweight exports for the drop's RPC surface: the
JSON-RPC method table and the FastAPI REST router live in `methods`, the
mounting helpers in `mount`.
"""

from typing import Dict, Final

# Base path under which drop endpoints are mounted into a host API.
RPC_PREFIX: Final[str] = "/drop"

# Suggested OpenAPI tag used by route modules in this package.
DROP_OPENAPI_TAG: Final[Dict[str, str]] = {
    "name": "drop",
    "description": "Tiered drop status, minting, schedule edits, royalties and treasury.",
}

__all__ = [
    "RPC_PREFIX",
    "DROP_OPENAPI_TAG",
]
