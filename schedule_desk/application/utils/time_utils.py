from __future__ import annotations

from datetime import date, datetime, time, timedelta

WIRE_FORMAT = "%Y-%m-%dT%H:%M:%S"
INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def to_wire(value: datetime) -> str:
    """Format a datetime the way the schedule service stores it (no zone, seconds precision)."""
    return value.strftime(WIRE_FORMAT)


def from_wire(value: str) -> datetime:
    """Parse a service timestamp. Zone information is dropped; all times are wall-clock."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


def to_input(value: datetime) -> str:
    return value.strftime(INPUT_FORMAT)


def parse_input(value: str) -> datetime | None:
    """Parse a datetime-local input value. Returns None if empty or malformed."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_display(value: datetime) -> str:
    """'Jan 10, 2024 9:00 AM'"""
    return f"{value:%b} {value.day}, {value.year} {_clock(value)}"


def format_long_display(value: datetime) -> str:
    """'January 10, 2024 9:00 AM'"""
    return f"{value:%B} {value.day}, {value.year} {_clock(value)}"


def _clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def start_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def end_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.max)


def start_of_week(value: date) -> date:
    """Weeks start on Sunday."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


def minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def enumerate_slots(start: datetime, end: datetime, slot_minutes: int) -> tuple[datetime, ...]:
    """Sub-slot start times from start up to (excluding) end."""
    slots: list[datetime] = []
    current = start
    step = timedelta(minutes=slot_minutes)
    while current < end:
        slots.append(current)
        current += step
    return tuple(slots)


def carry_time_of_day(target: datetime, source: datetime) -> datetime:
    """Keep target's date, take source's hour, minute and second."""
    return target.replace(hour=source.hour, minute=source.minute, second=source.second)


def same_minute(a: datetime, b: datetime) -> bool:
    return a.replace(second=0, microsecond=0) == b.replace(second=0, microsecond=0)
