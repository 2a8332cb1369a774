from __future__ import annotations
"""
tierdrop test suite package.

Tiny helpers shared across the tests. Everything here is deterministic: the
clock is manual and addresses are derived from labels, so runs are
reproducible across platforms.
"""

import hashlib

# Canonical deterministic seed for tests that need pseudo-randomness.
TEST_SEED: int = 0xD12095

# Canonical start time for manual clocks (2023-11-14T22:13:20Z).
T0: int = 1_700_000_000


def det_address(label: str) -> str:
    """Deterministic 20-byte hex address for a human-readable label."""
    return "0x" + hashlib.sha3_256(label.encode("utf-8")).hexdigest()[:40]


__all__ = ["TEST_SEED", "T0", "det_address"]
