"""
test_full_pipeline.py
──────────────────────────────────────────────────────────────────────────────
End-to-end run of the itinerary engine on the Jaipur demo trip:

  PART 1  Build
    Six OSM POIs, 3 days, moderate pace.  Prints the schedule and checks the
    day-1 layout.

  PART 2  Targeted edits
    add / swap / reduce_travel / relax / remove, one after another.  Each
    result must pass its own diff check, and every non-target day must come
    back unchanged.

  PART 3  Evaluation
    feasibility, grounding and edit-correctness scores for the final version.

  PART 4  Audit trail
    Build + edits are written to a temporary JSONL log and replayed; the
    replayed hash must match the final itinerary.

Run:
    python test_full_pipeline.py

Also collected by pytest (test_full_pipeline below).
──────────────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import sys
import tempfile
from datetime import date

import engine
from main import demo_edits, demo_pois
from modules.evaluation import evaluate_edit_correctness, run_itinerary_evaluations
from modules.observability.audit import itinerary_hash, record_build, record_edit
from modules.observability.logger import StructuredLogger
from modules.observability.replay import replay_trip
from schemas.edit import EditInstruction, EditParams
from schemas.itinerary import EditType, Itinerary, TimeBlock


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _banner(title: str) -> None:
    width = 70
    print("\n" + "═" * width)
    print(f"  {title}")
    print("═" * width)

def _section(title: str) -> None:
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")

def _ok(msg: str)   -> None: print(f"  ✓  {msg}")
def _info(msg: str) -> None: print(f"  ·  {msg}")

def _check(cond: bool, msg: str) -> None:
    assert cond, msg
    _ok(msg)


def _print_day_plan(itinerary: Itinerary) -> None:
    for day in itinerary.days:
        _info(f"Day {day.day} ({day.date}): {day.total_activities} activities, "
              f"feasible={day.is_feasible}")
        for kind, block in day.blocks():
            stops = ", ".join(f"{a.poi.name} {a.start_time}-{a.end_time}" for a in block.activities)
            _info(f"    {kind.value:<9} {stops}")


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────────────────────

def run_full_pipeline(logs_dir: str) -> Itinerary:
    trip_id = "pipeline_demo"
    audit = StructuredLogger(logs_dir)

    # ── PART 1 ────────────────────────────────────────────────────────────────
    _banner("PART 1  Build")
    itinerary = engine.build_itinerary(
        demo_pois(), days=3, start_date=date(2024, 2, 15), pace="moderate", city="Jaipur",
    )
    record_build(audit, trip_id, itinerary)
    _print_day_plan(itinerary)

    day1 = itinerary.get_day(1)
    _check(itinerary.total_activities == 5, "5 activities scheduled across 3 days")
    _check([a.start_time for a in day1.morning.activities] == ["09:00", "10:30"],
           "day 1 morning: 09:00 and 10:30 starts")
    _check(day1.afternoon is None, "day 1 afternoon left empty")
    _check(all(d.is_feasible for d in itinerary.days), "every day feasible")

    # ── PART 2 ────────────────────────────────────────────────────────────────
    _banner("PART 2  Targeted edits")
    original = itinerary
    instructions = demo_edits() + [
        EditInstruction(EditType.REMOVE, target_day=2, target_block=TimeBlock.AFTERNOON,
                        params=EditParams()),
    ]
    for instruction in instructions:
        _section(f"{instruction.edit_type.value} on day {instruction.target_day}")
        result = engine.apply_edit(itinerary, instruction)
        record_edit(audit, trip_id, itinerary, instruction, result)

        _info(result.changes.description)
        _check(result.diff.is_valid, "diff check passed")
        untouched = [d.day for d in itinerary.days if d.day != instruction.target_day]
        _check(all(d in result.diff.unchanged_days for d in untouched),
               f"days {untouched} unchanged")
        itinerary = result.itinerary

    _check(itinerary.metadata.version == 1 + len(instructions),
           f"version advanced to {itinerary.metadata.version}")
    _print_day_plan(itinerary)
    audit.close()

    # ── PART 3 ────────────────────────────────────────────────────────────────
    _banner("PART 3  Evaluation")
    for result in run_itinerary_evaluations(itinerary):
        _info(f"{result.eval_type.value:<12} passed={result.passed} score={result.score:.2f}")
        for issue in result.issues:
            _info(f"    {issue}")
    grounding = run_itinerary_evaluations(itinerary)[1]
    _check(grounding.passed, "every scheduled POI is grounded in OSM")

    whole_trip = evaluate_edit_correctness(original, itinerary, 1)
    _info(f"edit correctness vs. day 1 only: score={whole_trip.score:.2f} "
          f"(day 3 was edited too)")
    _check(not whole_trip.passed, "multi-day drift is detected")

    # ── PART 4 ────────────────────────────────────────────────────────────────
    _banner("PART 4  Audit trail")
    summary = replay_trip(trip_id, logs_dir=logs_dir, verbose=False)
    _check(summary.edits == len(instructions), f"{summary.edits} edits replayed")
    _check(summary.final_hash == itinerary_hash(itinerary), "replayed hash matches final itinerary")

    return itinerary


def test_full_pipeline(tmp_path):
    run_full_pipeline(str(tmp_path))


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        try:
            run_full_pipeline(tmp)
        except AssertionError as exc:
            print(f"  ✗  {exc}")
            sys.exit(1)
    _banner("ALL PARTS PASSED")
