from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

UTC_ZONE_NAME = "UTC"


def get_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name, treating a missing name or ``UTC`` as UTC."""
    if not name or name == UTC_ZONE_NAME:
        return timezone.utc
    return ZoneInfo(name)


def make_aware(dt, tz: tzinfo | None = None):
    if not dt:
        return

    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=tz or timezone.utc)


def to_iso_instant(dt: datetime) -> str:
    """ISO-8601 UTC instant with millisecond precision, e.g. ``2025-06-07T10:21:02.000Z``."""
    dt = make_aware(dt).astimezone(timezone.utc)
    return f"{dt.strftime('%Y-%m-%dT%H:%M:%S')}.{dt.microsecond // 1000:03d}Z"
