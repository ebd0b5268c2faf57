"""
modules/observability/replay.py
---------------------------------
Offline verification of a trip's recorded version chain.

Usage:
    python main.py --replay <trip_id>

Reads <AUDIT_LOG_DIR>/<trip_id>.jsonl and walks ITINERARY_BUILT and
ITINERARY_EDITED events in order, checking that

  - versions increase by exactly one per edit, and
  - each edit's before_hash equals the previous event's after_hash.

Raises RuntimeError("REPLAY_DIVERGENCE: ...") on the first break.  No engine
code runs; this is a pure log replay.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from modules.observability.logger import ITINERARY_BUILT, ITINERARY_EDITED, StructuredLogger

_REPLAY_EVENT_TYPES = frozenset({ITINERARY_BUILT, ITINERARY_EDITED})


@dataclass(frozen=True)
class ReplaySummary:
    trip_id:     str
    events:      int             # build + edit events replayed
    edits:       int
    version:     Optional[int]   # last version seen
    final_hash:  Optional[str]


def replay_trip(
    trip_id: str,
    *,
    logs_dir: Path | str | None = None,
    verbose: bool = True,
) -> ReplaySummary:
    """Replay a recorded trip and verify its version / hash chain."""
    audit = StructuredLogger(logs_dir)
    log_path = audit.path_for(trip_id)
    records = [r for r in audit.read(trip_id) if r.get("event_type") in _REPLAY_EVENT_TYPES]

    if verbose:
        print(f"\n{'=' * 60}")
        print(f"  REPLAY: trip {trip_id}")
        print(f"  Log file: {log_path}")
        print(f"  Version events: {len(records)}")
        print(f"{'=' * 60}\n")

    version: Optional[int] = None
    last_hash: Optional[str] = None
    edits = 0

    for step, rec in enumerate(records, start=1):
        event_type = rec["event_type"]
        ts = rec.get("timestamp", "")
        payload = rec.get("payload", {})

        if event_type == ITINERARY_BUILT:
            version = payload.get("version")
            last_hash = payload.get("after_hash")
            if verbose:
                print(f"  [{step:>4}] {ts}  ITINERARY_BUILT   "
                      f"v{version}  hash={str(last_hash)[:12]}")
            continue

        edits += 1
        before_v = payload.get("before_version")
        after_v = payload.get("after_version")
        before_h = payload.get("before_hash")

        if version is not None and before_v != version:
            raise RuntimeError(
                f"REPLAY_DIVERGENCE: step {step} edits version {before_v} "
                f"but the last recorded version is {version}"
            )
        if before_v is None or after_v != before_v + 1:
            raise RuntimeError(
                f"REPLAY_DIVERGENCE: step {step} moves version {before_v} -> {after_v}"
            )
        if last_hash is not None and before_h != last_hash:
            raise RuntimeError(
                f"REPLAY_DIVERGENCE: step {step} before_hash {str(before_h)[:16]} "
                f"!= previous after_hash {last_hash[:16]}"
            )

        version = after_v
        last_hash = payload.get("after_hash")
        if verbose:
            block = payload.get("target_block") or "-"
            print(f"  [{step:>4}] {ts}  ITINERARY_EDITED  "
                  f"{payload.get('edit_type')} day={payload.get('target_day')} block={block}  "
                  f"v{before_v}→v{after_v}  hash={str(before_h)[:12]}→{str(last_hash)[:12]}")

    if verbose:
        if last_hash is not None:
            print(f"\n  Final state hash: {last_hash[:16]}…  ✓ VERIFIED")
        else:
            print("\n  No version events, hash verification skipped.")
        print(f"\n{'=' * 60}")
        print("  REPLAY COMPLETE")
        print(f"{'=' * 60}\n")

    return ReplaySummary(
        trip_id=trip_id,
        events=len(records),
        edits=edits,
        version=version,
        final_hash=last_hash,
    )
