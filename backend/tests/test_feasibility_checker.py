from __future__ import annotations

import pytest

import engine
from conftest import AMBER_FORT, CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR, LMB, START
from modules.editing.feasibility_checker import check_block, check_day
from modules.planning.day_scheduler import make_activity
from modules.planning.pace import MODERATE
from modules.validation.errors import ItineraryValidationError
from schemas.itinerary import TimeBlock, build_block, build_day


def _block(kind, pois, start_minutes, duration):
    acts, cursor, previous = [], start_minutes, None
    for poi in pois:
        acts.append(make_activity(poi, cursor, duration, previous, MODERATE))
        cursor += duration
        previous = poi
    return build_block(kind, acts, acts[0].start_time)


def test_built_days_are_feasible(jaipur_itinerary):
    for day in jaipur_itinerary.days:
        assert check_day(day, "moderate").feasible


def test_empty_day():
    result = check_day(build_day(1, START), MODERATE)
    assert not result.feasible
    assert result.issues == ("Day has no activities",)


def test_block_limits():
    crowded = _block(
        TimeBlock.MORNING, [CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR, AMBER_FORT], 9 * 60, 60,
    )
    result = check_block(crowded, MODERATE)
    # 09:00-13:00 against 09:00-12:30 / 210 min
    assert result.issues == (
        "Activity count (4) exceeds maximum (3)",
        "Block duration (4h) exceeds maximum (4h)",
        "Activities extend beyond block time window",
    )


def test_day_issue_order():
    morning = _block(TimeBlock.MORNING, [CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR, AMBER_FORT], 9 * 60, 200)
    evening = _block(TimeBlock.EVENING, [LMB, CITY_PALACE, HAWA_MAHAL], 18 * 60 + 30, 20)
    day = build_day(1, START, morning=morning, evening=evening)

    issues = check_day(day, MODERATE).issues
    assert issues[0].startswith("Total time (") and issues[0].endswith("exceeds maximum (12h)")
    assert issues[1] == "Activity count (7) exceeds maximum (6)"
    assert issues[2] == "morning block: Activity count (4) exceeds maximum (3)"
    assert all(i.startswith("morning block: ") for i in issues[2:])


def test_stricter_pace_flags_same_day(jaipur_itinerary):
    day1 = jaipur_itinerary.get_day(1)
    assert check_day(day1, "moderate").feasible
    # two morning activities fit relaxed's cap, 09:00-11:30 fits its 12:00 end
    assert check_day(day1, "relaxed").feasible

    crowded = build_day(1, START, morning=_block(
        TimeBlock.MORNING, [CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR], 9 * 60, 45,
    ))
    assert check_day(crowded, "moderate").feasible
    assert check_day(crowded, "relaxed").issues == (
        "morning block: Activity count (3) exceeds maximum (2)",
    )


def test_engine_rejects_unknown_pace(jaipur_itinerary):
    with pytest.raises(ItineraryValidationError):
        engine.check_feasibility(jaipur_itinerary.get_day(1), "turbo")
