"""Timezone-aware instant helpers and the Interval value object.

Instants are plain aware ``datetime`` objects carrying a ``ZoneInfo``.
Minute arithmetic is done on the absolute timeline (through UTC) so that a
45-minute slot is 45 real minutes even across a DST change; day arithmetic
moves the local calendar date and re-resolves the wall-clock time in the zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_zone(name: str) -> ZoneInfo:
    """Return the IANA zone for ``name``.

    Raises:
        ValueError: if the zone is unknown.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {name!r}") from exc


def to_datetime(value: str | datetime, tz: str) -> datetime:
    """Parse an ISO-8601 string (or re-zone a datetime) into ``tz``.

    Strings with an explicit offset keep their instant and are converted to
    ``tz``; naive strings are read as wall-clock time in ``tz``.
    """
    zone = get_zone(tz)
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def to_iso(dt: datetime) -> str:
    """Format an instant as ISO 8601 with milliseconds and offset."""
    return dt.isoformat(timespec="milliseconds")


def now(tz: str) -> datetime:
    return datetime.now(tz=get_zone(tz))


def to_utc(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc)


def plus_minutes(dt: datetime, minutes: int) -> datetime:
    """Add elapsed minutes, keeping the zone of ``dt``."""
    return (to_utc(dt) + timedelta(minutes=minutes)).astimezone(dt.tzinfo)


def plus_days(dt: datetime, days: int) -> datetime:
    """Move the local date by ``days``, keeping the wall-clock time."""
    naive = dt.replace(tzinfo=None) + timedelta(days=days)
    return naive.replace(tzinfo=dt.tzinfo)


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def at_hour(day: datetime, hour: int) -> datetime:
    """``day``'s local date at ``hour``:00:00.000 in the same zone."""
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


def minutes_between(a: datetime, b: datetime) -> float:
    """Absolute distance between two instants, in minutes."""
    return abs((to_utc(a) - to_utc(b)).total_seconds()) / 60


@dataclass(frozen=True)
class Interval:
    """A closed-open span of time, used for both slots and busy periods."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return to_utc(self.end) - to_utc(self.start)

    def overlaps(self, other: Interval) -> bool:
        """True if the two intervals share more than a boundary instant."""
        return to_utc(self.start) < to_utc(other.end) and to_utc(other.start) < to_utc(self.end)

    def engulfs(self, other: Interval) -> bool:
        """True if ``other`` lies entirely inside this interval."""
        return to_utc(self.start) <= to_utc(other.start) and to_utc(other.end) <= to_utc(self.end)

    def to_dict(self) -> dict[str, str]:
        return {"start": to_iso(self.start), "end": to_iso(self.end)}
