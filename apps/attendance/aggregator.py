"""Attendance reconciliation over raw device punches.

Pure functions: no device access, no database, no shared state between calls.
Input records may arrive in any order.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

from apps.devices.zk import RawAttendanceRecord, RawUser
from libs.datetimes import get_timezone, to_iso_instant

from .constants import LOCAL_TIME_FORMAT, UNKNOWN_USER_NAME


@dataclass(frozen=True)
class DateRange:
    """Optional instant bounds. Both bounds are exclusive when present."""

    from_date: datetime | None = None
    to_date: datetime | None = None

    def contains(self, instant: datetime) -> bool:
        if self.from_date is not None and not instant > self.from_date:
            return False
        if self.to_date is not None and not instant < self.to_date:
            return False
        return True


@dataclass(frozen=True)
class AnnotatedAttendanceRecord:
    """A raw punch together with the enrolled user's display name."""

    record: RawAttendanceRecord
    display_name: str


@dataclass(frozen=True)
class DailyAttendanceSummary:
    """First and last punch of one user on one calendar date."""

    user_serial: int
    device_user_id: str
    display_name: str
    date: date
    check_in: datetime
    check_out: datetime


@dataclass(frozen=True)
class DateCount:
    date: date
    count: int


@dataclass(frozen=True)
class AttendanceCounts:
    total_attendances: int
    unique_users: int
    by_date: list[DateCount] = field(default_factory=list)


def filter_by_range(records: Iterable[RawAttendanceRecord], date_range: DateRange | None) -> list[RawAttendanceRecord]:
    """Keep records strictly after ``from_date`` and strictly before ``to_date``.

    A record exactly on either bound is excluded. Device order is preserved.
    """
    if date_range is None:
        return list(records)
    return [record for record in records if date_range.contains(record.record_timestamp)]


def build_user_index(users: Iterable[RawUser]) -> dict[str, str]:
    """Map device user id to display name; a repeated id keeps the later user."""
    return {user.device_user_id: user.display_name for user in users}


def resolve_display_name(user_index: Mapping[str, str], device_user_id: str) -> str:
    return user_index.get(device_user_id) or UNKNOWN_USER_NAME


def annotate(
    records: Iterable[RawAttendanceRecord], user_index: Mapping[str, str]
) -> list[AnnotatedAttendanceRecord]:
    return [
        AnnotatedAttendanceRecord(record=record, display_name=resolve_display_name(user_index, record.device_user_id))
        for record in records
    ]


def local_date(instant: datetime, timezone_name: str | None = None) -> date:
    """Calendar date of ``instant`` in ``timezone_name`` (UTC when omitted)."""
    return instant.astimezone(get_timezone(timezone_name)).date()


def summarize(
    records: Iterable[RawAttendanceRecord],
    user_index: Mapping[str, str] | None = None,
    timezone_name: str | None = None,
) -> list[DailyAttendanceSummary]:
    """Collapse punches into one check-in/check-out pair per (user, date).

    Records are grouped by ``(device_user_id, calendar date)``. The earliest
    punch of a group is the check-in and the latest the check-out; a group with
    a single punch has both equal. Output is sorted by date, then by device
    user id compared as strings.
    """
    user_index = user_index or {}
    groups: dict[tuple[str, date], list[RawAttendanceRecord]] = {}
    for record in records:
        key = (record.device_user_id, local_date(record.record_timestamp, timezone_name))
        groups.setdefault(key, []).append(record)

    summaries = []
    for (device_user_id, day), group in groups.items():
        first = min(group, key=lambda record: record.record_timestamp)
        last = max(group, key=lambda record: record.record_timestamp)
        summaries.append(
            DailyAttendanceSummary(
                user_serial=first.user_serial,
                device_user_id=device_user_id,
                display_name=resolve_display_name(user_index, device_user_id),
                date=day,
                check_in=first.record_timestamp,
                check_out=last.record_timestamp,
            )
        )

    summaries.sort(key=lambda summary: (summary.date, str(summary.device_user_id)))
    return summaries


def count_by_date(records: Iterable[RawAttendanceRecord], timezone_name: str | None = None) -> AttendanceCounts:
    """Total punches, distinct users and per-date punch counts sorted by date."""
    records = list(records)
    per_date: dict[date, int] = {}
    for record in records:
        day = local_date(record.record_timestamp, timezone_name)
        per_date[day] = per_date.get(day, 0) + 1

    return AttendanceCounts(
        total_attendances=len(records),
        unique_users=len({record.device_user_id for record in records}),
        by_date=[DateCount(date=day, count=count) for day, count in sorted(per_date.items())],
    )


def format_instant(instant: datetime, timezone_name: str | None = None) -> str:
    """Render an instant for API output.

    With a zone name the result is the local time of day (``10:21:02``);
    without one it is the full UTC instant (``2025-06-07T10:21:02.000Z``).
    """
    if timezone_name:
        return instant.astimezone(get_timezone(timezone_name)).strftime(LOCAL_TIME_FORMAT)
    return to_iso_instant(instant)
