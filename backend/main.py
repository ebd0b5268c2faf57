"""
main.py
--------
Itinerary engine command-line entry point.

Builds a three-day Jaipur itinerary from a fixed set of OpenStreetMap POIs
and prints it.

Run:
  python main.py                      build and print
  python main.py --pace fast          choose the pace (relaxed | moderate | fast)
  python main.py --edit               also apply a sequence of demo edits and
                                      record build + edits to the audit log
  python main.py --json               print the final itinerary as JSON
  python main.py --replay <trip_id>   verify a recorded trip's version chain

Notes:
  - No network access; all POIs are hardcoded below.
  - Audit logs go to config.AUDIT_LOG_DIR (AUDIT_LOG_DIR env var).
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import date

import config
import engine
from modules.evaluation import run_itinerary_evaluations
from modules.observability.audit import record_build, record_edit
from modules.observability.logger import StructuredLogger
from modules.validation.errors import ItineraryValidationError
from schemas.edit import EditInstruction, EditParams
from schemas.itinerary import EditType, Itinerary, TimeBlock
from schemas.poi import Coordinates, PointOfInterest
from schemas.serialization import itinerary_to_dict


# ── Demo data ──────────────────────────────────────────────────────────────────

def demo_pois() -> list[PointOfInterest]:
    """Six Jaipur POIs: a walkable old-city core plus two outliers."""
    def _poi(osm_id: int, name: str, category: str, lat: float, lon: float) -> PointOfInterest:
        return PointOfInterest(
            osm_id=osm_id, name=name, category=category,
            coordinates=Coordinates(lat, lon),
        )

    return [
        _poi(123456789, "City Palace",      "history", 26.9258, 75.8236),
        _poi(987654321, "Hawa Mahal",       "history", 26.9239, 75.8267),
        _poi(456789123, "Jantar Mantar",    "history", 26.9247, 75.8246),
        _poi(789123456, "Amber Fort",       "history", 26.9855, 75.8513),
        _poi(321654987, "Laxmi Mishthan Bhandar", "food", 26.9124, 75.7873),
        _poi(654987321, "Chokhi Dhani",     "culture", 26.8500, 75.8000),
    ]


def demo_edits() -> list[EditInstruction]:
    nahargarh = PointOfInterest(
        osm_id=112233445, name="Nahargarh Fort", category="history",
        coordinates=Coordinates(26.9373, 75.8155),
    )
    albert_hall = PointOfInterest(
        osm_id=556677889, name="Albert Hall Museum", category="museum",
        coordinates=Coordinates(26.9118, 75.8195),
    )
    return [
        EditInstruction(EditType.ADD, target_day=2, target_block=TimeBlock.AFTERNOON,
                        params=EditParams(poi_to_add=albert_hall)),
        EditInstruction(EditType.SWAP, target_day=3, target_block=TimeBlock.MORNING,
                        params=EditParams(new_poi=nahargarh, activity_index=0)),
        EditInstruction(EditType.REDUCE_TRAVEL, target_day=1,
                        params=EditParams(target_travel_time=0)),
        EditInstruction(EditType.RELAX, target_day=1,
                        params=EditParams(increase_duration=30)),
    ]


# ── Output helpers ─────────────────────────────────────────────────────────────

def _banner(title: str) -> None:
    width = 60
    print("\n" + "=" * width)
    print(f"  {title}")
    print("=" * width)


def _print_itinerary(itinerary: Itinerary) -> None:
    md = itinerary.metadata
    _banner(f"{itinerary.city.upper()}  |  {itinerary.duration} day(s)  |  "
            f"{itinerary.pace.value}  |  v{md.version}")
    for day in itinerary.days:
        flag = "" if day.is_feasible else "  [!] " + "; ".join(day.feasibility_issues)
        print(f"\n  Day {day.day} ({day.date.isoformat()}): {day.total_activities} activities, "
              f"{day.total_duration} min + {day.total_travel_time} min travel{flag}")
        for kind, block in day.blocks():
            print(f"    {kind.value:<9} {block.start_time}-{block.end_time}")
            for act in block.activities:
                leg = (f"  (+{act.travel_time_from_previous} min travel)"
                       if act.travel_time_from_previous else "")
                print(f"      {act.start_time}-{act.end_time}  {act.poi.name}{leg}")


def _print_evaluations(itinerary: Itinerary) -> None:
    _banner("EVALUATION")
    for result in run_itinerary_evaluations(itinerary):
        status = "PASS" if result.passed else "FAIL"
        print(f"  {result.eval_type.value:<17} {status}  score={result.score:.2f}")
        for issue in result.issues:
            print(f"      - {issue}")


def _arg_value(flag: str, default: str | None = None) -> str | None:
    if flag not in sys.argv:
        return default
    idx = sys.argv.index(flag)
    if idx + 1 >= len(sys.argv):
        print(f"Usage: python main.py {flag} <value>")
        sys.exit(1)
    return sys.argv[idx + 1]


# ── Pipeline ───────────────────────────────────────────────────────────────────

def run_demo(pace: str = "moderate", with_edits: bool = False) -> Itinerary:
    """Build the demo itinerary; optionally apply the demo edits with auditing."""
    itinerary = engine.build_itinerary(
        demo_pois(), days=3, start_date=date(2024, 2, 15), pace=pace, city="Jaipur",
    )
    _print_itinerary(itinerary)
    if not with_edits:
        return itinerary

    trip_id = f"demo_{uuid.uuid4().hex[:12]}"
    audit = StructuredLogger()
    record_build(audit, trip_id, itinerary)

    for instruction in demo_edits():
        result = engine.apply_edit(itinerary, instruction)
        record_edit(audit, trip_id, itinerary, instruction, result)
        itinerary = result.itinerary

        changes = result.changes
        print(f"\n  [Edit] {changes.description}")
        print(f"         added={list(changes.activities_added)} "
              f"removed={list(changes.activities_removed)} "
              f"travel_reduced={changes.travel_time_reduced} min")
        print(f"         feasible={result.feasibility.feasible}  diff_valid={result.diff.is_valid}")

    audit.close()
    _print_itinerary(itinerary)
    print(f"\n  Audit log : {audit.path_for(trip_id)}")
    print(f"  Replay    : python main.py --replay {trip_id}")
    return itinerary


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    if "--replay" in sys.argv:
        from modules.observability.replay import replay_trip
        replay_trip(_arg_value("--replay"))
        sys.exit(0)

    try:
        final = run_demo(
            pace=_arg_value("--pace", "moderate"),
            with_edits="--edit" in sys.argv,
        )
    except ItineraryValidationError as exc:
        print(f"Invalid input: {exc}")
        sys.exit(2)

    _print_evaluations(final)

    if "--json" in sys.argv:
        print("\nITINERARY (JSON):")
        print(json.dumps(itinerary_to_dict(final), indent=2))
