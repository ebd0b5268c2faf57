"""
config.py
---------
Central configuration for the itinerary engine and its HTTP adapter.
Service knobs come from environment variables; scheduling constants that are
part of the engine contract are plain module constants.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)

# ── Travel-time model ─────────────────────────────────────────────────────────
# Straight-line (Haversine) distance converted with fixed average speeds.
WALKING_SPEED_KMH: float = 5.0
DRIVING_SPEED_KMH: float = 30.0          # urban average incl. traffic and stops
WALKING_FLOOR_MINUTES: int = 5
DRIVING_FLOOR_MINUTES: int = 10
# Used whenever either endpoint has missing / out-of-range coordinates.
TRAVEL_FALLBACK_MINUTES: int = 15
DEFAULT_TRAVEL_MODE: str = "driving"     # "walking" | "driving"

# ── Scheduling ────────────────────────────────────────────────────────────────
DAY_MAX_MINUTES: int = 12 * 60           # activity + travel cap per day
DEFAULT_PACE: str = "moderate"           # fallback for lenient pace lookups
DEFAULT_CLUSTER_SIZE: int = 5
DEFAULT_CLUSTER_DISTANCE_KM: float = 5.0

# Category → time-block heuristics for POIs without an explicit timeBlock tag
MORNING_CATEGORIES: frozenset[str] = frozenset({"history", "culture", "museum"})
EVENING_CATEGORIES: frozenset[str] = frozenset({"food", "nightlife", "entertainment"})

# Tag keys that carry an explicit time-of-day preference on a POI
TIME_BLOCK_TAG_KEYS: tuple[str, ...] = ("timeBlock", "time_block")

# ── Evaluation thresholds ─────────────────────────────────────────────────────
EVAL_MAX_TRAVEL_RATIO: float = 0.5
EVAL_FEASIBILITY_PASS_SCORE: float = 0.7
EVAL_EDIT_PASS_SCORE: float = 0.8
EVAL_GROUNDING_PASS_SCORE: float = 0.9

# ── Observability ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# JSONL audit logs (one file per trip).  Relative paths resolve against backend/.
AUDIT_LOG_DIR: Path = Path(
    os.getenv("AUDIT_LOG_DIR", str(Path(__file__).parent / "logs"))
)

# ── HTTP adapter ──────────────────────────────────────────────────────────────
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
API_RELOAD: bool = os.getenv("API_RELOAD", "false").lower() in ("1", "true", "yes")
CORS_ALLOW_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]
