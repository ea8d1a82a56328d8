from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel


def _wall_clock(value: datetime) -> datetime:
    # zones are not modelled; keep the wall-clock reading
    return value.replace(tzinfo=None)


WallClock = Annotated[datetime, AfterValidator(_wall_clock)]


class ClientCreateSchema(BaseModel):
    name: str
    email: str = ""
    phone: str = ""


class ClientSchema(BaseModel):
    id: int
    name: str
    email: str
    phone: str


class ScheduleCreateSchema(BaseModel):
    client_id: int
    appointment_time: WallClock
    end_time: WallClock | None = None
    description: str | None = None


class ScheduleUpdateSchema(BaseModel):
    # appointment_time is checked by the route so the error body matches the other 400s
    appointment_time: WallClock | None = None
    end_time: WallClock | None = None
    client_id: int | None = None
    description: str | None = None


class ScheduleSchema(BaseModel):
    id: int
    client_id: int
    appointment_time: datetime
    end_time: datetime | None = None
    description: str | None = None
    client_name: str | None = None


class ScheduleChangeSchema(BaseModel):
    message: str
    appointment: ScheduleSchema
