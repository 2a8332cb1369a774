from __future__ import annotations

"""
Prometheus metrics for the tiered drop.

We expose counters and gauges covering:
- mints: tokens minted by source (sale / reserve / remediation) and tier
- payments: base units collected by minting
- remediations: stalled tiers force-completed
- withdrawals: owner payouts and amounts
- rejections: failed operations by error code
- supply: unminted units and the current tier index

This module keeps its own registry so embedding apps can merge or expose it
directly, and can be mounted into any ASGI/FastAPI app via the helpers at the
bottom.
"""


from typing import Tuple

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Gauge, generate_latest, make_asgi_app)

REGISTRY = CollectorRegistry()

# ────────────────────────────────────────────────────────────────────────────────
# Label conventions
#   source: "sale" | "reserve" | "remediation"
#   tier:   "0".."3" | "reserve"
#   op:     operation name ("mint", "update_tier", ...)
#   code:   DropError.code
# ────────────────────────────────────────────────────────────────────────────────

TOKENS_MINTED = Counter(
    "tierdrop_tokens_minted_total",
    "Total tokens minted by source and tier.",
    labelnames=("source", "tier"),
    registry=REGISTRY,
)

PAYMENTS_RECEIVED = Counter(
    "tierdrop_payments_received_base_units_total",
    "Total payment collected by minting, in base units.",
    registry=REGISTRY,
)

REMEDIATIONS = Counter(
    "tierdrop_stalled_remediations_total",
    "Total stalled tiers force-completed to the owner.",
    labelnames=("tier",),
    registry=REGISTRY,
)

WITHDRAWALS = Counter(
    "tierdrop_withdrawals_total",
    "Total treasury withdrawals.",
    registry=REGISTRY,
)

WITHDRAWN_AMOUNT = Counter(
    "tierdrop_withdrawn_base_units_total",
    "Total base units withdrawn from the treasury.",
    registry=REGISTRY,
)

REJECTIONS = Counter(
    "tierdrop_rejected_operations_total",
    "Operations rejected by validation, by operation and error code.",
    labelnames=("op", "code"),
    registry=REGISTRY,
)

UNMINTED = Gauge(
    "tierdrop_unminted_tokens",
    "Tokens not yet minted.",
    registry=REGISTRY,
)

CURRENT_TIER = Gauge(
    "tierdrop_current_tier_index",
    "Index of the lowest tier that is not sold out (4 when complete).",
    registry=REGISTRY,
)


def render_latest() -> Tuple[bytes, str]:
    """Return (payload, content_type) for a /metrics response."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def metrics_asgi_app():
    """ASGI app serving this registry; mount with `app.mount("/metrics", metrics_asgi_app())`."""
    return make_asgi_app(registry=REGISTRY)


__all__ = [
    "REGISTRY",
    "TOKENS_MINTED",
    "PAYMENTS_RECEIVED",
    "REMEDIATIONS",
    "WITHDRAWALS",
    "WITHDRAWN_AMOUNT",
    "REJECTIONS",
    "UNMINTED",
    "CURRENT_TIER",
    "render_latest",
    "metrics_asgi_app",
]
