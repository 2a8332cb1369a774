from __future__ import annotations
"""
tierdrop.config: configuration for a tiered drop

Covers:
- Supply: total supply, the reserve minted at initialization, opening price
- Schedule rules: lead time for tier edits, stall age, price cooldown, tier gap
- Royalty defaults (basis points, 10_000 = 100%)

Protocol constants (not configurable, owners cannot move them):
- TIER_COUNT           four sequential tiers
- MAX_ROYALTY_BPS      400 bps ceiling on the advertised royalty
- BPS_DENOMINATOR      10_000
- STALL_PRICE_CEILING  highest price at which a stalled tier may be remediated

Environment overrides (all optional; sensible defaults provided):

  # Supply (units; base units for prices)
  TIERDROP_TOTAL_SUPPLY=24
  TIERDROP_RESERVE_OWNER=4
  TIERDROP_OPENING_PRICE=10000000000000000

  # Schedule rules (seconds)
  TIERDROP_MIN_LEAD_TIME=7200
  TIERDROP_STALL_AGE=2592000
  TIERDROP_PRICE_COOLDOWN=1209600
  TIERDROP_MIN_TIER_GAP=0

  # Royalty
  TIERDROP_ROYALTY_BPS=250

You can also load from a JSON or YAML file via
`TIERDROP_CONFIG_FILE=/path/to/config.(json|yaml|yml)`.
File values override defaults; environment overrides the file.
"""


from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional
import json
import os
from pathlib import Path

import yaml


TIER_COUNT = 4
BPS_DENOMINATOR = 10_000
MAX_ROYALTY_BPS = 400
# 0.001 of a 10**18 base-unit coin.
STALL_PRICE_CEILING = 10**15

HOUR = 60 * 60
DAY = 24 * HOUR


# -------------------------- Data classes --------------------------


@dataclass
class SupplyConfig:
    """
    Fixed collection size and the reserve minted at initialization.

    The reserve goes to the owner (`reserve_owner` units) and to any extra
    wallets listed in `reserve_wallets` (address -> units). Whatever remains is
    split across the four tiers; a remainder lands on the last tier.
    """
    total_supply: int = 24
    reserve_owner: int = 4
    reserve_wallets: Dict[str, int] = field(default_factory=dict)
    opening_price: int = 10**16  # 0.01 coin

    def reserve_total(self) -> int:
        return self.reserve_owner + sum(self.reserve_wallets.values())

    def sellable(self) -> int:
        return self.total_supply - self.reserve_total()

    def validate(self) -> None:
        if self.total_supply <= 0:
            raise ValueError("total_supply must be positive.")
        if self.reserve_owner < 0 or any(v < 0 for v in self.reserve_wallets.values()):
            raise ValueError("reserve allocations must be non-negative.")
        if any(not addr for addr in self.reserve_wallets):
            raise ValueError("reserve_wallets keys must be non-empty addresses.")
        if self.sellable() < TIER_COUNT:
            raise ValueError(
                f"supply after reserve must cover {TIER_COUNT} tiers "
                f"(total={self.total_supply}, reserve={self.reserve_total()})."
            )
        if self.opening_price < 0:
            raise ValueError("opening_price must be non-negative.")


@dataclass
class ScheduleRules:
    """Anti-manipulation windows, in seconds."""
    min_lead_time: int = 2 * HOUR
    stall_age: int = 30 * DAY
    price_cooldown: int = 14 * DAY
    min_tier_gap: int = 0

    def validate(self) -> None:
        for name, v in (("min_lead_time", self.min_lead_time),
                        ("stall_age", self.stall_age),
                        ("price_cooldown", self.price_cooldown),
                        ("min_tier_gap", self.min_tier_gap)):
            if v < 0:
                raise ValueError(f"{name} must be non-negative seconds (got {v}).")


@dataclass
class RoyaltyDefaults:
    """Royalty applied at construction; the receiver defaults to the owner."""
    basis_points: int = 250

    def validate(self) -> None:
        if not (0 <= self.basis_points <= MAX_ROYALTY_BPS):
            raise ValueError(
                f"basis_points must be between 0 and {MAX_ROYALTY_BPS} (got {self.basis_points})."
            )


@dataclass
class DropConfig:
    supply: SupplyConfig = field(default_factory=SupplyConfig)
    schedule: ScheduleRules = field(default_factory=ScheduleRules)
    royalty: RoyaltyDefaults = field(default_factory=RoyaltyDefaults)

    def validate(self) -> None:
        self.supply.validate()
        self.schedule.validate()
        self.royalty.validate()

    def tier_allocations(self) -> List[int]:
        """Units per tier; the division remainder is added to the last tier."""
        sellable = self.supply.sellable()
        base, rem = divmod(sellable, TIER_COUNT)
        allocs = [base] * TIER_COUNT
        allocs[-1] += rem
        return allocs

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["constants"] = {
            "tier_count": TIER_COUNT,
            "bps_denominator": BPS_DENOMINATOR,
            "max_royalty_bps": MAX_ROYALTY_BPS,
            "stall_price_ceiling": STALL_PRICE_CEILING,
        }
        return d


# -------------------------- Loaders --------------------------


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(str(v).replace("_", ""))
    except Exception as e:
        raise ValueError(f"Invalid int for {name}: {v!r}") from e


def from_env(base: Optional[DropConfig] = None, prefix: str = "TIERDROP_") -> DropConfig:
    """
    Build a DropConfig from environment variables, optionally layering on top of `base`.
    """
    cfg = base or DropConfig()

    new_cfg = DropConfig(
        supply=SupplyConfig(
            total_supply=_getenv_int(f"{prefix}TOTAL_SUPPLY", cfg.supply.total_supply),
            reserve_owner=_getenv_int(f"{prefix}RESERVE_OWNER", cfg.supply.reserve_owner),
            reserve_wallets=dict(cfg.supply.reserve_wallets),
            opening_price=_getenv_int(f"{prefix}OPENING_PRICE", cfg.supply.opening_price),
        ),
        schedule=ScheduleRules(
            min_lead_time=_getenv_int(f"{prefix}MIN_LEAD_TIME", cfg.schedule.min_lead_time),
            stall_age=_getenv_int(f"{prefix}STALL_AGE", cfg.schedule.stall_age),
            price_cooldown=_getenv_int(f"{prefix}PRICE_COOLDOWN", cfg.schedule.price_cooldown),
            min_tier_gap=_getenv_int(f"{prefix}MIN_TIER_GAP", cfg.schedule.min_tier_gap),
        ),
        royalty=RoyaltyDefaults(
            basis_points=_getenv_int(f"{prefix}ROYALTY_BPS", cfg.royalty.basis_points),
        ),
    )
    new_cfg.validate()
    return new_cfg


def from_mapping(data: Dict[str, Any]) -> DropConfig:
    """Build a DropConfig from a plain dict (the shape of `DropConfig.to_dict()`)."""

    def pick(dct: Dict[str, Any], key: str, default: Any) -> Any:
        return dct.get(key, default)

    supply = data.get("supply", {}) or {}
    schedule = data.get("schedule", {}) or {}
    royalty = data.get("royalty", {}) or {}

    cfg = DropConfig(
        supply=SupplyConfig(
            total_supply=int(pick(supply, "total_supply", SupplyConfig().total_supply)),
            reserve_owner=int(pick(supply, "reserve_owner", SupplyConfig().reserve_owner)),
            reserve_wallets={str(k): int(v) for k, v in (pick(supply, "reserve_wallets", {}) or {}).items()},
            opening_price=int(pick(supply, "opening_price", SupplyConfig().opening_price)),
        ),
        schedule=ScheduleRules(
            min_lead_time=int(pick(schedule, "min_lead_time", ScheduleRules().min_lead_time)),
            stall_age=int(pick(schedule, "stall_age", ScheduleRules().stall_age)),
            price_cooldown=int(pick(schedule, "price_cooldown", ScheduleRules().price_cooldown)),
            min_tier_gap=int(pick(schedule, "min_tier_gap", ScheduleRules().min_tier_gap)),
        ),
        royalty=RoyaltyDefaults(
            basis_points=int(pick(royalty, "basis_points", RoyaltyDefaults().basis_points)),
        ),
    )
    cfg.validate()
    return cfg


def from_file(path: str | os.PathLike[str]) -> DropConfig:
    """
    Load configuration from a JSON or YAML file.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    return from_mapping(data)


def load() -> DropConfig:
    """
    Load configuration using the following precedence:
      1) File at $TIERDROP_CONFIG_FILE (JSON/YAML)
      2) Environment variables (TIERDROP_*), applied on top of defaults or file values
    """
    file_path = os.getenv("TIERDROP_CONFIG_FILE")
    base = from_file(file_path) if file_path else DropConfig()
    return from_env(base=base)


def pretty(cfg: Optional[DropConfig] = None) -> str:
    """Return a human-readable JSON string of the current config."""
    obj = (cfg or load()).to_dict()
    return json.dumps(obj, indent=2, sort_keys=True)


__all__ = [
    "TIER_COUNT",
    "BPS_DENOMINATOR",
    "MAX_ROYALTY_BPS",
    "STALL_PRICE_CEILING",
    "HOUR",
    "DAY",
    "SupplyConfig",
    "ScheduleRules",
    "RoyaltyDefaults",
    "DropConfig",
    "from_env",
    "from_mapping",
    "from_file",
    "load",
    "pretty",
]
