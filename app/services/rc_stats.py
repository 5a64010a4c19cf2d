"""
Dashboard statistics for the RC registry.
Recomputed from the full record list on every call, nothing is cached.
"""

from collections import Counter
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo
from app.config import settings


def stats_timezone() -> Optional[tzinfo]:
    """Configured zone for monthly buckets; None means the host's local zone."""
    return ZoneInfo(settings.STATS_TIMEZONE) if settings.STATS_TIMEZONE else None


def month_key(created_at: datetime, tz: Optional[tzinfo] = None) -> str:
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(tz).strftime("%Y-%m")


def compute_stats(records: Iterable, tz: Optional[tzinfo] = None) -> dict:
    records = list(records)
    by_state = Counter(rc.registration_state for rc in records if rc.registration_state)
    monthly = Counter(month_key(rc.created_at, tz) for rc in records if rc.created_at is not None)

    return {
        "total": len(records),
        "active_count": sum(1 for rc in records if (rc.registration_info or {}).get("active") is True),
        "stolen_count": sum(1 for rc in records if rc.stolen is True),
        "suspicious_count": sum(1 for rc in records if rc.suspicious is True),
        "by_state": dict(by_state),
        "monthly_verifications": [{"month": m, "count": monthly[m]} for m in sorted(monthly)],
    }
