# verification_log.py
# In-memory verification records and officer dashboard statistics

from typing import List, Dict, Any, Iterable, Optional
from datetime import datetime, timezone
import logging
import random

import pandas as pd

from similarity_engine import AnalysisResult, RISK_LEVELS

logger = logging.getLogger(__name__)

VALID_STATUSES = ("Pending", "Approved", "Rejected")
REF_ID_PREFIX = "REF-"
REF_ID_RANGE = 100000
DASHBOARD_LIMIT = 20


def make_reference_id(rng: Optional[random.Random] = None) -> str:
    """Short human-facing reference such as ``REF-48213``."""
    if rng is None:
        rng = random.SystemRandom()
    return f"{REF_ID_PREFIX}{rng.randrange(REF_ID_RANGE)}"


def build_verification_record(
    title: str,
    result: AnalysisResult,
    ref_id: Optional[str] = None,
    timestamp: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> Dict[str, Any]:
    """
    Describe one verification the way callers store and list it.

    Args:
        title: Title exactly as submitted
        result: Its analysis
        ref_id: Reference to use; generated when omitted
        timestamp: Verification time; defaults to now (UTC)
        rng: Random source for the generated reference

    Returns:
        Record dict with status ``Pending``
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    return {
        "ref_id": ref_id or make_reference_id(rng),
        "title": title,
        "score": result.score,
        "risk": result.risk,
        "flags": list(result.flags),
        "matches": list(result.matches),
        "status": "Pending",
        "timestamp": timestamp.isoformat(),
    }


def update_status(record: Dict[str, Any], status: str) -> Dict[str, Any]:
    """
    Return a copy of ``record`` with a new review status.

    Only Pending records can be decided; Approved and Rejected are final.
    """
    if status not in VALID_STATUSES:
        raise ValueError(f"Invalid status: {status!r}")
    if record.get("status") != "Pending":
        raise ValueError(f"{record.get('ref_id')} already decided: {record.get('status')}")

    updated = dict(record)
    updated["status"] = status
    logger.info(f"{record.get('ref_id')} status {record.get('status')} -> {status}")
    return updated


def sort_newest_first(records: Iterable[Dict[str, Any]],
                      limit: Optional[int] = DASHBOARD_LIMIT) -> List[Dict[str, Any]]:
    """
    Order records by timestamp, newest first; records without one sort last.

    At most ``limit`` records are returned (the dashboard feed size); pass
    None for all of them.
    """
    records = list(records)
    if not records:
        return []

    df = pd.DataFrame(records)
    if "timestamp" not in df.columns:
        return records[:limit]
    order = pd.to_datetime(df["timestamp"], utc=True, errors="coerce", format="ISO8601")
    order = order.sort_values(ascending=False, na_position="last", kind="stable")
    return [records[i] for i in order.index[:limit]]


def summarize_records(records: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Aggregate verification records for the officer dashboard.

    Returns:
        Counts (total, high_risk, pending, approved, rejected), the average
        score and the risk distribution in percent
    """
    df = pd.DataFrame(list(records), columns=["score", "risk", "status"])

    total = len(df)
    risk_counts = df["risk"].value_counts()
    status_counts = df["status"].value_counts()

    def pct(count):
        return (count / total * 100) if total > 0 else 0

    stats = {
        "total": total,
        "high_risk": int(risk_counts.get("High", 0)),
        "pending": int(status_counts.get("Pending", 0)),
        "approved": int(status_counts.get("Approved", 0)),
        "rejected": int(status_counts.get("Rejected", 0)),
        "average_score": float(df["score"].mean()) if total > 0 else 0.0,
        "risk_distribution": {
            level.lower(): pct(int(risk_counts.get(level, 0))) for level in RISK_LEVELS
        },
    }
    logger.debug(f"Dashboard stats: {stats}")
    return stats
