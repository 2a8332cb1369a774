from __future__ import annotations

"""
tierdrop.cli.simulate
---------------------

Devnet utility to replay a drop against an in-memory collection driven by a
manual clock. Useful for rehearsing a release calendar (tier dates, price
cuts, remediation windows) before committing to it.

A plan is a JSON or YAML document:

    owner: "0xowner"              # optional, default 0xowner
    start: 1700000000             # optional, clock start (UNIX seconds)
    config:                       # optional, same shape as `rules` output
      supply: {reserve_owner: 0}
    steps:
      - op: initialize
      - op: mint
        args: {buyer: "0xalice", payment: 10000000000000000}
      - advance_days: 31
      - op: remediate_stalled

Each step may advance the clock (`advance` seconds, `advance_hours`,
`advance_days`) and/or call one operation. `caller` defaults to the buyer
for `mint` and to the plan owner otherwise.

Examples
--------
# Show the effective rules (defaults, $TIERDROP_CONFIG_FILE, TIERDROP_* env)
python -m tierdrop.cli.simulate rules

# Replay a plan, stop on the first rejected step
python -m tierdrop.cli.simulate run plan.yaml --strict
"""

import inspect
import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml

from tierdrop import config as drop_config
from tierdrop.clock import ManualClock
from tierdrop.collection import DropCollection
from tierdrop.config import DAY, HOUR
from tierdrop.errors import DropError

app = typer.Typer(
    name="simulate",
    add_completion=False,
    no_args_is_help=True,
    help="Replay a tiered drop against a manual clock (devnet/test tooling).",
)

DEFAULT_OWNER = "0xowner"
DEFAULT_START = 1_700_000_000

# operation name -> DropCollection method; queries are allowed too
OPERATIONS = {
    "initialize",
    "mint",
    "update_tier",
    "adjust_price",
    "remediate_stalled",
    "set_royalty",
    "withdraw",
    "withdraw_all",
    "record_transfer",
    "transfer_ownership",
    "status",
    "drops",
    "balance_of",
    "token_ids_of",
    "owner_of",
    "royalty_info",
    "treasury_balance",
    "snapshot",
}

# operations that take no caller
_NO_CALLER = {
    "record_transfer",
    "status",
    "drops",
    "balance_of",
    "token_ids_of",
    "owner_of",
    "royalty_info",
    "treasury_balance",
    "snapshot",
}


# -------------------- utils --------------------

def _jsonable(x: Any) -> Any:
    if is_dataclass(x) and not isinstance(x, type):
        return _jsonable(asdict(x))
    if isinstance(x, dict):
        return {str(k): _jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_jsonable(v) for v in x]
    if hasattr(x, "value") and isinstance(getattr(x, "value"), str):
        return x.value
    return x


def _load_plan(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise typer.BadParameter("plan must be a mapping with a 'steps' list", param_hint="PLAN")
    if not isinstance(data.get("steps", []), list):
        raise typer.BadParameter("'steps' must be a list", param_hint="PLAN")
    return data


def _advance_by(step: Dict[str, Any]) -> int:
    return (
        int(step.get("advance", 0))
        + int(step.get("advance_hours", 0)) * HOUR
        + int(step.get("advance_days", 0)) * DAY
    )


def _call(drop: DropCollection, op: str, args: Dict[str, Any], owner: str) -> Any:
    if op not in OPERATIONS:
        raise typer.BadParameter(f"unknown operation {op!r}", param_hint="steps[].op")
    kwargs = dict(args)
    if op not in _NO_CALLER and "caller" not in kwargs:
        kwargs["caller"] = kwargs.get("buyer", owner) if op == "mint" else owner
    fn = getattr(drop, op)
    try:
        bound = inspect.signature(fn).bind(**kwargs)
    except TypeError as e:
        raise ValueError(f"bad arguments for {op!r}: {e}") from e
    return fn(*bound.args, **bound.kwargs)


def build_collection(plan: Dict[str, Any]) -> Tuple[DropCollection, ManualClock]:
    cfg = drop_config.from_mapping(plan["config"]) if plan.get("config") else drop_config.load()
    clock = ManualClock(int(plan.get("start", DEFAULT_START)))
    return DropCollection(str(plan.get("owner", DEFAULT_OWNER)), config=cfg, clock=clock), clock


# -------------------- commands --------------------

@app.command("rules")
def cmd_rules() -> None:
    """
    Print the effective configuration (defaults, config file, env) as JSON.
    """
    typer.echo(drop_config.pretty())


@app.command("run")
def cmd_run(
    plan_path: Path = typer.Argument(..., metavar="PLAN", exists=True, dir_okay=False, help="JSON/YAML plan file."),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero on the first rejected step."),
) -> None:
    """
    Replay PLAN step by step, printing one JSON line per step with the
    operation result (or error) and the drop status afterwards.
    """
    plan = _load_plan(plan_path)
    drop, clock = build_collection(plan)
    owner = drop.owner()
    failures: List[int] = []

    for i, step in enumerate(plan.get("steps", [])):
        step = step or {}
        clock.advance(_advance_by(step))
        op: Optional[str] = step.get("op")
        line: Dict[str, Any] = {"step": i, "now": clock.now}
        if op:
            line["op"] = op
            try:
                line["result"] = _jsonable(_call(drop, op, step.get("args") or {}, owner))
                line["ok"] = True
            except (DropError, ValueError) as e:
                line["ok"] = False
                line["error"] = e.to_dict() if isinstance(e, DropError) else {"code": "BAD_REQUEST", "message": str(e)}
                failures.append(i)
        line["status"] = drop.status().to_dict()
        typer.echo(json.dumps(line, sort_keys=True))
        if strict and failures:
            typer.secho(f"step {i} rejected: {line['error']['code']}", err=True, fg="red")
            raise typer.Exit(code=1)

    summary = {
        "steps": len(plan.get("steps", [])),
        "failed": failures,
        "snapshot": _jsonable(drop.snapshot()),
    }
    typer.echo(json.dumps(summary, sort_keys=True))


@app.callback(invoke_without_command=True)
def _main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is not None:
        return
    typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
