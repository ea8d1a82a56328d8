from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Appointment:
    id: int
    client_id: int
    appointment_time: datetime
    end_time: datetime | None = None
    description: str | None = None
    client_name: str | None = None  # joined by the listing endpoint only


@dataclass(frozen=True)
class AppointmentInput:
    """Fields sent on create/update. A None description is left out of the request."""

    client_id: int | None
    appointment_time: datetime
    end_time: datetime | None = None
    description: str | None = None
