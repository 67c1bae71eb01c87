"""Wall-clock helpers shared by expansion, scheduling and reconciliation."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from .config import settings
from .errors import ValidationError


def local_tz() -> ZoneInfo:
    return settings.tz


def parse_time_of_day(value: str | None) -> time:
    """Parse ``H:M`` / ``HH:MM`` / ``HH:MM:SS`` into a time, falling back to the default station time."""
    if not value:
        value = settings.default_station_time
    parts = value.strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        return time(hours, minutes)
    except (ValueError, IndexError) as exc:
        raise ValidationError(f"Invalid time of day '{value}'") from exc


def format_time_hhmm(value: str | None) -> str:
    return parse_time_of_day(value).strftime("%H:%M")


def combine_local(day: date, at: time) -> datetime:
    return datetime.combine(day, at.replace(second=0, microsecond=0), tzinfo=local_tz())


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=local_tz())


def day_bounds(day: date) -> tuple[str, str]:
    """Return the [start, next-start) UTC ISO bounds of a local calendar day."""
    return to_store(start_of_day(day)), to_store(start_of_day(day + timedelta(days=1)))


def to_store(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=local_tz())
    return value.astimezone(timezone.utc).isoformat()


def parse_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def now_local() -> datetime:
    return datetime.now(local_tz())
