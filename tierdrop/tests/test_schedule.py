import pytest

from tierdrop.access import Ownable
from tierdrop.config import DAY, HOUR, STALL_PRICE_CEILING, ScheduleRules
from tierdrop.dtypes.tier import TierState
from tierdrop.errors import InvalidTransition, Unauthorized
from tierdrop.schedule import DropScheduler, DropTable, stall_blockers
from tierdrop.tests import T0

OWNER = "0xowner"


def _mk_table(rules: ScheduleRules = None) -> DropTable:
    return DropTable([5, 5, 5, 5], rules or ScheduleRules(), Ownable(OWNER))


def _open(table: DropTable, price: int = 10**16) -> DropTable:
    table.open_first(price, T0)
    return table


def test_update_tier_requires_lead_time():
    table = _open(_mk_table())
    with pytest.raises(InvalidTransition):
        table.update_tier(1, 10**16, T0 + HOUR, caller=OWNER, now=T0)
    snap = table.update_tier(1, 10**16, T0 + 2 * HOUR, caller=OWNER, now=T0)
    assert snap.start_date == T0 + 2 * HOUR
    assert snap.last_price_change == T0 + 2 * HOUR
    assert table.snapshots()[1].price == 10**16


def test_update_tier_index_and_owner_checks():
    table = _open(_mk_table())
    for idx in (0, 4, -1):
        with pytest.raises(InvalidTransition):
            table.update_tier(idx, 1, T0 + DAY, caller=OWNER, now=T0)
    with pytest.raises(Unauthorized):
        table.update_tier(1, 1, T0 + DAY, caller="0xmallory", now=T0)
    with pytest.raises(InvalidTransition):
        table.update_tier(1, -1, T0 + DAY, caller=OWNER, now=T0)


def test_scheduled_tier_locks_inside_lead_window():
    table = _open(_mk_table())
    table.update_tier(1, 10**16, T0 + 3 * HOUR, caller=OWNER, now=T0)
    # 1.5h later the tier starts in 1.5h: frozen
    with pytest.raises(InvalidTransition) as ei:
        table.update_tier(1, 10**15, T0 + DAY, caller=OWNER, now=T0 + 90 * 60)
    assert ei.value.details["index"] == 1
    # once started it can no longer be rescheduled either
    with pytest.raises(InvalidTransition):
        table.update_tier(1, 10**15, T0 + DAY, caller=OWNER, now=T0 + 4 * HOUR)


def test_tier_may_not_start_before_previous():
    table = _open(_mk_table(ScheduleRules(min_tier_gap=HOUR)))
    table.update_tier(1, 1, T0 + 10 * HOUR, caller=OWNER, now=T0)
    with pytest.raises(InvalidTransition):
        table.update_tier(2, 1, T0 + 5 * HOUR, caller=OWNER, now=T0)
    with pytest.raises(InvalidTransition):
        table.update_tier(2, 1, T0 + 10 * HOUR + 59 * 60, caller=OWNER, now=T0)
    table.update_tier(2, 1, T0 + 11 * HOUR, caller=OWNER, now=T0)


def test_adjust_price_restarts_cooldown():
    table = _open(_mk_table())
    snap = table.adjust_price(0, 10**15, caller=OWNER, now=T0 + DAY)
    assert snap.price == 10**15
    assert snap.last_price_change == T0 + DAY
    # no lead-time restriction on live price changes
    table.adjust_price(2, 7, caller=OWNER, now=T0 + DAY)

    table.tier(0).tokens_minted = 5
    with pytest.raises(InvalidTransition):
        table.adjust_price(0, 1, caller=OWNER, now=T0 + DAY)
    with pytest.raises(Unauthorized):
        table.adjust_price(1, 1, caller="0xmallory", now=T0 + DAY)


def test_status_is_derived_from_counters():
    table = _mk_table()
    sched = DropScheduler(table, ScheduleRules())
    st = sched.status(T0)
    assert (st.current_index, st.active, st.complete) == (0, False, False)

    _open(table)
    assert sched.status(T0).active is True
    assert sched.active_tier(T0).index == 0

    table.tier(0).tokens_minted = 5
    st = sched.status(T0)
    assert (st.current_index, st.active) == (1, False)
    assert sched.active_tier(T0) is None

    for i in range(1, 4):
        table.tier(i).tokens_minted = 5
    st = sched.status(T0)
    assert (st.current_index, st.active, st.complete) == (4, False, True)
    assert sched.current_tier() is None
    assert sched.stall_blockers(T0) == ["complete"]


def test_tier_states_show_blocked_tiers():
    table = _open(_mk_table())
    table.update_tier(1, 1, T0 + 3 * HOUR, caller=OWNER, now=T0)
    sched = DropScheduler(table, ScheduleRules())
    # tier 1's date has passed but tier 0 is unsold: progression is by sellout
    assert sched.states(T0 + DAY) == [
        TierState.ACTIVE,
        TierState.BLOCKED,
        TierState.PENDING,
        TierState.PENDING,
    ]
    assert sched.status(T0 + DAY).current_index == 0


def test_stall_blockers():
    rules = ScheduleRules()
    table = _open(_mk_table(), price=STALL_PRICE_CEILING)
    tier = table.tier(0)

    assert stall_blockers(tier, T0 + DAY, rules) == ["too_young", "price_cooldown"]
    assert stall_blockers(tier, T0 + 30 * DAY, rules) == []

    tier.last_price_change = T0 + 16 * DAY
    assert stall_blockers(tier, T0 + 30 * DAY, rules) == ["price_cooldown"]
    assert stall_blockers(tier, T0 + 31 * DAY, rules) == []

    tier.price = STALL_PRICE_CEILING + 1
    assert stall_blockers(tier, T0 + 31 * DAY, rules) == ["price_above_ceiling"]

    assert stall_blockers(table.tier(1), T0 + 31 * DAY, rules) == ["not_active"]
