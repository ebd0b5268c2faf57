"""Block-level edits, exercised directly on day 1's morning block."""

from __future__ import annotations

import pytest

from conftest import (
    ALBERT_HALL,
    AMBER_FORT,
    CHOKHI_DHANI,
    CITY_PALACE,
    HAWA_MAHAL,
    JANTAR_MANTAR,
)
from modules.editing.edit_operations import (
    _OPERATIONS,
    add_activity,
    apply_edit_to_block,
    reduce_travel,
    relax_block,
    remove_activity,
    swap_activity,
)
from modules.planning.clock import add_minutes
from modules.planning.day_scheduler import leg_from, make_activity
from modules.planning.geometry import estimate_travel_time
from modules.planning.pace import MODERATE
from modules.validation.errors import ItineraryValidationError
from schemas.edit import EditParams
from schemas.itinerary import EditType, TimeBlock, build_block

MORNING = TimeBlock.MORNING


@pytest.fixture
def morning(jaipur_itinerary):
    # City Palace 09:00-10:00, Jantar Mantar 10:30-11:30
    return jaipur_itinerary.get_day(1).morning


def _laid_out(kind, pois, start_minutes, duration=60):
    """Back-to-back block ignoring windows, for shapes the scheduler never emits."""
    durations = duration if isinstance(duration, list) else [duration] * len(pois)
    acts, previous, cursor = [], None, start_minutes
    for poi, duration in zip(pois, durations):
        travel, _ = leg_from(previous, poi, MODERATE)
        start = cursor + (travel or 0)
        acts.append(make_activity(poi, start, duration, previous, MODERATE))
        cursor = start + duration
        previous = poi
    return build_block(kind, acts, acts[0].start_time)


# ── relax ─────────────────────────────────────────────────────────────────────

def test_relax_drops_last_activity(morning):
    out = relax_block(morning, MORNING, EditParams(reduce_activities=True), MODERATE)
    assert [a.poi.osm_id for a in out.activities] == [CITY_PALACE.osm_id]
    assert out.end_time == "10:00"
    assert len(morning.activities) == 2


def test_relax_extends_last_activity(morning):
    out = relax_block(morning, MORNING, EditParams(increase_duration=30), MODERATE)
    last = out.activities[-1]
    assert (last.start_time, last.end_time, last.duration) == ("10:30", "12:00", 90)
    assert out.total_duration == 150


def test_relax_keeps_single_activity(morning):
    single = relax_block(morning, MORNING, EditParams(reduce_activities=True), MODERATE)
    again = relax_block(single, MORNING, EditParams(reduce_activities=True), MODERATE)
    assert len(again.activities) == 1


def test_relax_needs_a_parameter(morning):
    with pytest.raises(ItineraryValidationError):
        relax_block(morning, MORNING, EditParams(), MODERATE)
    with pytest.raises(ItineraryValidationError, match="increase_duration must be >= 0"):
        relax_block(morning, MORNING, EditParams(increase_duration=-15), MODERATE)


# ── swap ──────────────────────────────────────────────────────────────────────

def test_swap_last_gets_fresh_leg_and_duration(morning):
    out = swap_activity(morning, MORNING, EditParams(new_poi=AMBER_FORT, activity_index=1), MODERATE)
    new = out.activities[1]
    travel = estimate_travel_time(CITY_PALACE, AMBER_FORT) + MODERATE.travel_buffer
    assert new.poi == AMBER_FORT
    assert new.travel_time_from_previous == travel
    assert new.start_time == add_minutes("10:00", travel)
    assert new.duration == 60


def test_swap_first_retimes_followers(morning):
    out = swap_activity(morning, MORNING, EditParams(new_poi=ALBERT_HALL, activity_index=0), MODERATE)
    first, second = out.activities
    assert (first.poi, first.start_time, first.end_time) == (ALBERT_HALL, "09:00", "10:30")
    assert first.travel_time_from_previous is None
    # Jantar Mantar keeps its recorded leg and is only shifted
    assert second.travel_time_from_previous == 30
    assert (second.start_time, second.end_time) == ("11:00", "12:00")


def test_swap_defaults_to_last_activity(morning):
    out = swap_activity(morning, MORNING, EditParams(new_poi=HAWA_MAHAL), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE, HAWA_MAHAL]


def test_swap_validation(morning):
    with pytest.raises(ItineraryValidationError, match="swap requires new_poi"):
        swap_activity(morning, MORNING, EditParams(activity_index=0), MODERATE)
    with pytest.raises(ItineraryValidationError, match="out of range"):
        swap_activity(morning, MORNING, EditParams(new_poi=AMBER_FORT, activity_index=5), MODERATE)
    with pytest.raises(ItineraryValidationError, match="has no activities"):
        swap_activity(None, MORNING, EditParams(new_poi=AMBER_FORT), MODERATE)


# ── add ───────────────────────────────────────────────────────────────────────

def test_add_appends_after_last(morning):
    out = add_activity(morning, MORNING, EditParams(poi_to_add=HAWA_MAHAL), MODERATE)
    added = out.activities[-1]
    assert added.poi == HAWA_MAHAL
    assert added.travel_time_from_previous == 30
    assert (added.start_time, added.end_time) == ("12:00", "13:00")
    assert out.start_time == morning.start_time


def test_add_creates_missing_block_at_window_start():
    out = add_activity(None, TimeBlock.AFTERNOON, EditParams(poi_to_add=ALBERT_HALL), MODERATE)
    assert out.block is TimeBlock.AFTERNOON
    assert out.start_time == "13:30"
    assert [(a.start_time, a.end_time) for a in out.activities] == [("13:30", "15:00")]


def test_add_to_full_block_is_rejected():
    full = _laid_out(MORNING, [CITY_PALACE, JANTAR_MANTAR, HAWA_MAHAL], 9 * 60)
    with pytest.raises(ItineraryValidationError, match="already holds 3 of 3"):
        add_activity(full, MORNING, EditParams(poi_to_add=AMBER_FORT), MODERATE)


def test_add_requires_poi(morning):
    with pytest.raises(ItineraryValidationError, match="add requires poi_to_add"):
        add_activity(morning, MORNING, EditParams(), MODERATE)


# ── remove ────────────────────────────────────────────────────────────────────

def test_remove_first_promotes_successor(morning):
    out = remove_activity(morning, MORNING, EditParams(activity_index=0), MODERATE)
    (only,) = out.activities
    assert only.poi == JANTAR_MANTAR
    assert only.travel_time_from_previous is None
    assert only.travel_distance_from_previous is None
    assert (only.start_time, only.end_time) == ("09:00", "10:00")


def test_remove_middle_recomputes_leg():
    block = _laid_out(MORNING, [CITY_PALACE, AMBER_FORT, JANTAR_MANTAR], 9 * 60, duration=45)
    out = remove_activity(block, MORNING, EditParams(poi_id_to_remove=AMBER_FORT.osm_id), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE, JANTAR_MANTAR]
    assert out.activities[1].travel_time_from_previous == 30
    assert out.activities[1].start_time == "10:15"


def test_remove_unknown_id_removes_last(morning):
    out = remove_activity(morning, MORNING, EditParams(poi_id_to_remove=42), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE]


def test_remove_from_missing_block(morning):
    with pytest.raises(ItineraryValidationError):
        remove_activity(None, TimeBlock.EVENING, EditParams(), MODERATE)
    with pytest.raises(ItineraryValidationError, match="out of range"):
        remove_activity(morning, MORNING, EditParams(activity_index=-1), MODERATE)


# ── reduce_travel ─────────────────────────────────────────────────────────────

def test_reduce_travel_reorders_by_nearest_neighbour():
    block = _laid_out(MORNING, [CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR], 9 * 60)
    out = reduce_travel(block, MORNING, EditParams(), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE, JANTAR_MANTAR, HAWA_MAHAL]
    assert out.start_time == block.start_time


def test_reduce_travel_to_zero_keeps_one_poi():
    block = _laid_out(MORNING, [CITY_PALACE, AMBER_FORT, CHOKHI_DHANI], 9 * 60, duration=50)
    out = reduce_travel(block, MORNING, EditParams(target_travel_time=0), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE]
    assert out.activities[0].duration == 50
    assert out.travel_time == 0


def test_reduce_travel_keeps_each_visit_of_a_repeated_poi():
    block = _laid_out(MORNING, [CITY_PALACE, JANTAR_MANTAR, CITY_PALACE], 9 * 60, duration=[60, 60, 90])
    out = reduce_travel(block, MORNING, EditParams(), MODERATE)
    assert [a.poi for a in out.activities] == [CITY_PALACE, CITY_PALACE, JANTAR_MANTAR]
    assert [a.duration for a in out.activities] == [60, 90, 60]
    assert out.total_duration == block.total_duration == 210


def test_reduce_travel_single_activity_is_unchanged(jaipur_itinerary):
    block = jaipur_itinerary.get_day(2).morning
    out = reduce_travel(block, MORNING, EditParams(target_travel_time=0), MODERATE)
    assert out == block


def test_reduce_travel_rejects_negative_target(morning):
    with pytest.raises(ItineraryValidationError):
        reduce_travel(morning, MORNING, EditParams(target_travel_time=-1), MODERATE)


def test_dispatcher_covers_every_edit_type(morning):
    assert set(_OPERATIONS) == set(EditType)
    params = {
        EditType.RELAX:         EditParams(reduce_activities=True),
        EditType.SWAP:          EditParams(new_poi=AMBER_FORT),
        EditType.ADD:           EditParams(poi_to_add=HAWA_MAHAL),
        EditType.REMOVE:        EditParams(),
        EditType.REDUCE_TRAVEL: EditParams(),
    }
    for edit_type in EditType:
        out = apply_edit_to_block(morning, MORNING, edit_type, params[edit_type], MODERATE)
        assert out.block is MORNING
