"""
schemas/edit.py
---------------
Dataclasses for the edit path: the instruction coming in, and the change
summary / feasibility / diff results going out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from schemas.itinerary import EditType, Itinerary, TimeBlock
from schemas.poi import PointOfInterest


@dataclass(frozen=True)
class EditParams:
    """Kind-specific parameters.  Which ones are required depends on EditType."""
    new_poi:            Optional[PointOfInterest] = None   # swap
    poi_to_add:         Optional[PointOfInterest] = None   # add
    activity_index:     Optional[int] = None               # swap / remove
    poi_id_to_remove:   Optional[int] = None               # remove
    reduce_activities:  bool = False                       # relax
    increase_duration:  Optional[int] = None               # relax, minutes
    target_travel_time: Optional[int] = None               # reduce_travel, minutes


@dataclass(frozen=True)
class EditInstruction:
    edit_type:    EditType
    target_day:   int
    target_block: Optional[TimeBlock] = None
    params:       EditParams = field(default_factory=EditParams)


@dataclass(frozen=True)
class EditChanges:
    """Human-readable summary of what one edit did to the target day."""
    day_modified:        int
    blocks_modified:     tuple[TimeBlock, ...]
    edit_type:           EditType
    activities_added:    tuple[int, ...] = ()      # osm ids
    activities_removed:  tuple[int, ...] = ()
    activities_modified: tuple[int, ...] = ()      # kept but re-timed / extended
    travel_time_reduced: int = 0                   # minutes, never negative
    description:         str = ""


@dataclass(frozen=True)
class FeasibilityResult:
    feasible: bool
    issues:   tuple[str, ...] = ()


@dataclass(frozen=True)
class DiffResult:
    changed_days:   tuple[int, ...] = ()
    unchanged_days: tuple[int, ...] = ()
    violations:     tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations


@dataclass(frozen=True)
class EditResult:
    itinerary:   Itinerary
    changes:     EditChanges
    feasibility: FeasibilityResult
    diff:        DiffResult
