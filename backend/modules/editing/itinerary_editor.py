"""
modules/editing/itinerary_editor.py
-----------------------------------
Edit path orchestration: one EditInstruction -> a new itinerary version.

  1. Validate the instruction against the itinerary (day exists, params).
  2. Resolve which block(s) of the target day to edit.
  3. Apply the block edit(s); every other day is cloned unchanged.
  4. Rebuild the target day (totals recomputed), run check_day() on it and
     store the result on the day.
  5. check_diff() against the input; violations are logged and returned.
  6. metadata.version + 1, is_edit, edit_target; total_activities recomputed.

All-or-nothing: any ItineraryValidationError is raised before a new
itinerary exists, and the input itinerary is never modified.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from modules.editing.diff_checker import activities_equal, check_diff
from modules.editing.edit_operations import apply_edit_to_block
from modules.editing.feasibility_checker import check_day
from modules.planning.pace import PaceProfile, get_pace_profile
from modules.validation.errors import ItineraryValidationError
from modules.validation.ingestion_validator import validate_day_number, validate_pois
from schemas.edit import EditChanges, EditInstruction, EditResult
from schemas.itinerary import (
    BLOCK_ORDER,
    DayBlock,
    EditTarget,
    EditType,
    Itinerary,
    ItineraryDay,
    ItineraryMetadata,
    TimeBlock,
    assemble_itinerary,
    build_day,
    clone_day,
)

logger = logging.getLogger(__name__)


# ── Validation / block resolution ─────────────────────────────────────────────

def _validate_instruction(itinerary: Itinerary, instruction: EditInstruction) -> ItineraryDay:
    if not itinerary.days:
        raise ItineraryValidationError("Cannot edit itinerary: no days found")

    check = validate_day_number(instruction.target_day, itinerary.duration)
    if not check.valid:
        raise ItineraryValidationError(check.errors)
    day = itinerary.get_day(instruction.target_day)
    if day is None:
        raise ItineraryValidationError(f"Day {instruction.target_day} not found in itinerary")

    params = instruction.params
    new_pois = [p for p in (params.new_poi, params.poi_to_add) if p is not None]
    if new_pois:
        validate_pois(new_pois)
    return day


def resolve_blocks(
    day: ItineraryDay,
    instruction: EditInstruction,
    profile: PaceProfile,
) -> list[TimeBlock]:
    """
    Blocks of *day* the instruction applies to.

      explicit target_block        -> that block (may not exist yet for add)
      reduce_travel, no block      -> every block with more than one activity
      add, no block                -> first non-empty block with room
      anything else, no block      -> first non-empty block
    """
    if instruction.target_block is not None:
        return [instruction.target_block]

    populated = [kind for kind, blk in day.blocks() if blk.activities]

    if instruction.edit_type is EditType.REDUCE_TRAVEL:
        kinds = [kind for kind in populated if len(day.block(kind).activities) > 1]
    elif instruction.edit_type is EditType.ADD:
        kinds = [
            kind for kind in populated
            if len(day.block(kind).activities) < profile.max_activities_per_block
        ][:1]
    else:
        kinds = populated[:1]

    if not kinds:
        raise ItineraryValidationError(
            f"Day {day.day} has no block that a {instruction.edit_type.value} edit can apply to"
        )
    return kinds


# ── Change summary ────────────────────────────────────────────────────────────

def summarize_changes(
    before: ItineraryDay,
    after: ItineraryDay,
    instruction: EditInstruction,
    blocks: list[TimeBlock],
) -> EditChanges:
    old_acts = before.activities()
    new_acts = after.activities()
    old_ids = Counter(a.poi.osm_id for a in old_acts)
    new_ids = Counter(a.poi.osm_id for a in new_acts)

    added = tuple((new_ids - old_ids).elements())
    removed = tuple((old_ids - new_ids).elements())
    old_by_id = {a.poi.osm_id: a for a in old_acts}
    modified = tuple(
        a.poi.osm_id for a in new_acts
        if a.poi.osm_id in old_by_id
        and a.poi.osm_id not in added
        and not activities_equal(old_by_id[a.poi.osm_id], a)
    )

    block_str = (
        f" {instruction.target_block.value} block" if instruction.target_block else ""
    )
    return EditChanges(
        day_modified=instruction.target_day,
        blocks_modified=tuple(blocks),
        edit_type=instruction.edit_type,
        activities_added=added,
        activities_removed=removed,
        activities_modified=modified,
        travel_time_reduced=max(0, before.total_travel_time - after.total_travel_time),
        description=(
            f"Modified day {instruction.target_day}{block_str} "
            f"using {instruction.edit_type.value} operation"
        ),
    )


# ── Entry point ───────────────────────────────────────────────────────────────

def apply_edit(itinerary: Itinerary, instruction: EditInstruction) -> EditResult:
    """
    Apply one edit and return the new version with its checks.

    Raises:
        ItineraryValidationError: bad target day, missing parameters, index
            out of range, full block on add, or nothing to edit.
    """
    target = _validate_instruction(itinerary, instruction)
    profile = get_pace_profile(itinerary.pace)
    kinds = resolve_blocks(target, instruction, profile)

    new_blocks: dict[TimeBlock, Optional[DayBlock]] = {
        kind: target.block(kind) for kind in BLOCK_ORDER
    }
    for kind in kinds:
        edited = apply_edit_to_block(
            new_blocks[kind], kind, instruction.edit_type, instruction.params, profile,
        )
        new_blocks[kind] = edited if edited.activities else None

    rebuilt = build_day(
        target.day, target.date,
        **{kind.value: blk for kind, blk in new_blocks.items()},
    )
    feasibility = check_day(rebuilt, profile)
    if feasibility.issues:
        rebuilt = build_day(
            target.day, target.date,
            feasibility_issues=feasibility.issues,
            **{kind.value: blk for kind, blk in new_blocks.items()},
        )

    days = [
        rebuilt if d.day == instruction.target_day else clone_day(d)
        for d in itinerary.days
    ]
    edited_itinerary = assemble_itinerary(
        city=itinerary.city,
        duration=itinerary.duration,
        start_date=itinerary.start_date,
        pace=itinerary.pace,
        days=days,
        total_pois=itinerary.total_pois,
        metadata=ItineraryMetadata(
            created_at=itinerary.metadata.created_at,
            version=itinerary.metadata.version + 1,
            is_edit=True,
            edit_target=EditTarget(
                day=instruction.target_day,
                edit_type=instruction.edit_type,
                block=instruction.target_block,
            ),
        ),
    )

    diff = check_diff(
        itinerary, edited_itinerary, instruction.target_day, instruction.target_block,
    )
    if not diff.is_valid:
        logger.warning("apply_edit: diff check violations: %s", "; ".join(diff.violations))

    changes = summarize_changes(target, rebuilt, instruction, kinds)
    logger.info(
        "apply_edit: %s on day %d (%s) -> version %d, feasible=%s",
        instruction.edit_type.value, instruction.target_day,
        ", ".join(k.value for k in kinds), edited_itinerary.metadata.version,
        feasibility.feasible,
    )
    return EditResult(
        itinerary=edited_itinerary,
        changes=changes,
        feasibility=feasibility,
        diff=diff,
    )
