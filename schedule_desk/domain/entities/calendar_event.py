from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CalendarEvent:
    """Display-layer join of an appointment and its client, as rendered on the calendar."""

    id: int
    title: str
    start: datetime
    end: datetime | None
    client_id: int
    description: str | None = None
