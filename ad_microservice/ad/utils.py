from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from ldap3.utils.conv import escape_filter_chars

from ..timezone_utils import format_local, from_epoch_ms
from .exceptions import TimestampParseError

log = logging.getLogger(__name__)

# Milliseconds between 1601-01-01 (Windows FILETIME epoch) and 1970-01-01.
FILETIME_EPOCH_OFFSET_MS = 11_644_473_600_000

_GENERALIZED_TIME_RE = re.compile(
    r"^(?P<ts>\d{14})(?:[.,](?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}(?:\d{2})?)$"
)


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values (\\ * ( ) NUL)."""
    return escape_filter_chars(value)


def decode_filetime(raw: int) -> Optional[datetime]:
    """Convert Windows FILETIME (100ns ticks since 1601-01-01) to a local datetime.

    0 means "never" (e.g. a user who has not logged on yet) and yields None.
    Values that fall outside the datetime range (the 0x7FFF... "never expires"
    sentinel) yield None as well.
    """
    n = int(raw)
    if n <= 0:
        return None
    ms = n // 10_000 - FILETIME_EPOCH_OFFSET_MS
    try:
        return from_epoch_ms(ms)
    except (OverflowError, ValueError, OSError):
        log.debug("FILETIME %d is out of range, treating as absent", n)
        return None


def decode_generalized_time(raw: str) -> datetime:
    """Parse LDAP generalized time (yyyyMMddHHmmss[.f|,f](Z|+HH|+HHMM)).

    Raises TimestampParseError on malformed input.
    """
    s = (raw or "").strip()
    m = _GENERALIZED_TIME_RE.match(s)
    if not m:
        raise TimestampParseError(f"Malformed generalized time: {raw!r}")

    try:
        dt = datetime.strptime(m.group("ts"), "%Y%m%d%H%M%S")
    except ValueError as e:
        raise TimestampParseError(f"Malformed generalized time: {raw!r}") from e

    frac = m.group("frac")
    if frac:
        dt = dt.replace(microsecond=int(frac[:6].ljust(6, "0")))

    tz = m.group("tz")
    if tz == "Z":
        tzinfo = timezone.utc
    else:
        sign = -1 if tz[0] == "-" else 1
        hours = int(tz[1:3])
        minutes = int(tz[3:5]) if len(tz) == 5 else 0
        tzinfo = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return dt.replace(tzinfo=tzinfo)


def decode_guid(raw: Optional[bytes]) -> Optional[uuid.UUID]:
    """Convert an AD objectGUID blob (mixed-endian) into a UUID.

    The first three fields are stored little-endian, the remaining 8 bytes
    as-is, which is exactly the layout of `uuid.UUID(bytes_le=...)`.
    """
    if raw is None:
        return None
    data = bytes(raw)
    if len(data) != 16:
        # Known inconsistency in some directories; decode best-effort.
        log.warning("objectGUID has %d bytes instead of 16, decoding best-effort", len(data))
        data = data[:16].ljust(16, b"\x00")
    return uuid.UUID(bytes_le=data)


def encode_guid(value: uuid.UUID) -> bytes:
    """Inverse of decode_guid: UUID -> AD objectGUID byte layout."""
    return value.bytes_le


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """YYYY-MM-DD HH:MM:SS rendering, or None when the timestamp is absent."""
    return format_local(dt)
