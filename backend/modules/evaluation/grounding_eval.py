"""
modules/evaluation/grounding_eval.py
------------------------------------
Checks that every scheduled POI is a real OpenStreetMap element: it carries
an OSM id, an OSM type and coordinates.
"""

from __future__ import annotations

import config
from modules.evaluation.types import EvalResult, EvalType
from modules.validation.ingestion_validator import OSM_TYPES
from modules.validation.normalization import coordinates_usable
from schemas.itinerary import Itinerary


def evaluate_itinerary_grounding(itinerary: Itinerary) -> EvalResult:
    issues: list[str] = []
    checked = 0
    mapped = 0

    for day in itinerary.days:
        for act in day.activities():
            checked += 1
            poi = act.poi
            if isinstance(poi.osm_id, int) and poi.osm_id > 0:
                mapped += 1
            else:
                issues.append(f'POI "{poi.name}" missing OSM ID')
            if poi.osm_type not in OSM_TYPES:
                issues.append(f'POI "{poi.name}" missing OSM type')
            if not coordinates_usable(poi.coordinates):
                issues.append(f'POI "{poi.name}" missing coordinates')

    if checked == 0:
        score = 0.0
    else:
        score = 1.0 - (checked - mapped) / checked
    if issues:
        score -= min(0.3, len(issues) * 0.05)
    score = round(max(0.0, score), 4)

    all_mapped = checked > 0 and checked == mapped
    return EvalResult(
        eval_type=EvalType.GROUNDING,
        passed=all_mapped and not issues and score >= config.EVAL_GROUNDING_PASS_SCORE,
        score=score,
        details={
            "poisChecked":    checked,
            "poisWithOSMIds": mapped,
            "allPOIsMapped":  all_mapped,
        },
        issues=tuple(issues),
        metadata={"totalPOIs": checked, "mappedPOIs": mapped},
    )
