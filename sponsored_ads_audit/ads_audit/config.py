"""Runtime settings and rule thresholds for bulk report analysis."""

from __future__ import annotations

import math
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _parse_target_acos() -> float:
    raw = os.getenv("ADS_AUDIT_TARGET_ACOS", "20")
    try:
        target = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid ADS_AUDIT_TARGET_ACOS: {raw}") from exc
    if not math.isfinite(target) or target <= 0:
        raise ValueError(f"ADS_AUDIT_TARGET_ACOS must be a positive number, got {raw}")
    return target


def _parse_store_dir() -> Path:
    raw = os.getenv("ADS_AUDIT_STORE_DIR", "")
    if raw.strip():
        return Path(raw).expanduser()
    return PROJECT_ROOT / "output" / "analyses"


DEFAULT_TARGET_ACOS = _parse_target_acos()
STORE_DIR = _parse_store_dir()
LOG_LEVEL = os.getenv("ADS_AUDIT_LOG_LEVEL", "INFO").upper()

# Wasted spend
WASTED_MIN_CLICKS = 5

# Inefficient spend
INEFFICIENT_ACOS_MULTIPLIER = 1.3
INEFFICIENT_CAMPAIGN_MIN_SPEND = 50.0
INEFFICIENT_KEYWORD_MIN_SPEND = 20.0

# Recommendations
RECOMMENDATION_SPEND_GATE = 100.0
TOP_PERFORMER_ACOS_RATIO = 0.8
TOP_PERFORMER_MIN_ORDERS = 3
TOP_PERFORMER_MIN_SPEND = 20.0
BID_REDUCTION_FACTOR = 0.7
BID_INCREASE_FACTOR = 1.4
LOW_CVR_LIMIT = 5.0
LOW_CVR_MIN_CLICKS = 20
LOW_CVR_MIN_SPEND = 30.0
MAX_KEYWORDS_PER_CAMPAIGN = 5
