"""
modules/planning/clustering.py
------------------------------
Proximity clustering and nearest-neighbour route ordering.

Both algorithms are greedy and deterministic: the same input order always
gives the same output.  Neither is optimal; the itinerary builder relies on
them being predictable, not minimal.
"""

from __future__ import annotations

import logging

import config
from modules.planning.geometry import distance_km
from schemas.poi import PointOfInterest

logger = logging.getLogger(__name__)


def cluster_pois(
    pois: list[PointOfInterest],
    max_cluster_size: int = config.DEFAULT_CLUSTER_SIZE,
    max_distance_km: float = config.DEFAULT_CLUSTER_DISTANCE_KM,
) -> list[list[PointOfInterest]]:
    """
    Group POIs by proximity.

    Algorithm:
      1. Seed = first remaining POI.
      2. Candidates = remaining POIs within max_distance_km of the seed (inclusive).
      3. Stable-sort candidates by distance to the seed, admit the closest
         until the cluster holds max_cluster_size POIs.
      4. Remove admitted POIs from the pool; repeat until empty.

    Every input POI lands in exactly one cluster.

    Args:
        pois:             POIs with usable coordinates.
        max_cluster_size: Upper bound on cluster length (values < 1 act as 1).
        max_distance_km:  Radius around the seed.

    Returns:
        List of clusters, each a non-empty list of POIs.
    """
    size_cap = max(1, int(max_cluster_size))
    remaining = list(pois)
    clusters: list[list[PointOfInterest]] = []

    while remaining:
        seed = remaining.pop(0)
        nearby = [
            (distance_km(seed, p), idx)
            for idx, p in enumerate(remaining)
        ]
        nearby = [(d, idx) for d, idx in nearby if d <= max_distance_km]
        nearby.sort(key=lambda pair: pair[0])          # stable: ties keep input order

        admitted = {idx for _, idx in nearby[: size_cap - 1]}
        cluster = [seed] + [remaining[idx] for _, idx in nearby[: size_cap - 1]]
        remaining = [p for idx, p in enumerate(remaining) if idx not in admitted]
        clusters.append(cluster)

    logger.debug(
        "cluster_pois: %d POIs -> %d clusters (size<=%d, radius=%.1f km)",
        len(pois), len(clusters), size_cap, max_distance_km,
    )
    return clusters


def route_order(pois: list[PointOfInterest]) -> list[int]:
    """
    Nearest-neighbour visiting order as indices into *pois*, starting from
    index 0.  Ties on distance go to the lower index.
    """
    if not pois:
        return []

    remaining = list(range(1, len(pois)))
    current = 0
    order = [current]

    while remaining:
        nearest_pos = 0
        nearest_km = float("inf")
        for pos, idx in enumerate(remaining):
            km = distance_km(pois[current], pois[idx])
            if km < nearest_km:
                nearest_km = km
                nearest_pos = pos
        current = remaining.pop(nearest_pos)
        order.append(current)

    return order


def optimize_route(pois: list[PointOfInterest]) -> list[PointOfInterest]:
    """
    Nearest-neighbour ordering starting from the first POI.

    Always returns a new list that is a permutation of the input.  Ties on
    distance go to the candidate that appears first in the input.
    """
    return [pois[i] for i in route_order(pois)]
