from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _tz_name() -> str:
    """Preferred TZ name from environment (Docker/Unix TZ)."""
    return (os.getenv("TZ") or "UTC").strip() or "UTC"


def get_local_tzinfo():
    """Return tzinfo used to present directory timestamps.

    - Tries system zoneinfo (ZoneInfo) for the TZ environment variable.
    - Defaults to UTC when the zone is unknown.
    """
    name = _tz_name()
    if name.upper() in {"UTC", "GMT", "ETC/UTC", "ETC/GMT"}:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def from_epoch_ms(ms: int) -> datetime:
    """Milliseconds since 1970-01-01 UTC as an aware datetime in the local zone."""
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.astimezone(get_local_tzinfo())


def format_local(dt: Optional[datetime]) -> Optional[str]:
    """Format timestamp as YYYY-MM-DD HH:MM:SS in its own zone (no TZ suffix)."""
    if dt is None:
        return None
    return dt.strftime("%Y-%m-%d %H:%M:%S")
