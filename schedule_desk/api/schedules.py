from __future__ import annotations

import logging
import re
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from schedule_desk.api.schemas import (
    ScheduleChangeSchema,
    ScheduleCreateSchema,
    ScheduleSchema,
    ScheduleUpdateSchema,
)
from schedule_desk.application.exceptions import AppointmentNotFoundError
from schedule_desk.application.ports.schedule_repository import ScheduleRepositoryPort
from schedule_desk.domain.entities.appointment import Appointment, AppointmentInput
from schedule_desk.wiring.dependencies import get_schedule_repository

router = APIRouter()
logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_schema(appointment: Appointment) -> ScheduleSchema:
    return ScheduleSchema(
        id=appointment.id,
        client_id=appointment.client_id,
        appointment_time=appointment.appointment_time,
        end_time=appointment.end_time,
        description=appointment.description,
        client_name=appointment.client_name,
    )


def _parse_id(raw: str) -> int:
    # leading integer wins: "7.5" and "7abc" address appointment 7
    match = _LEADING_INT.match(raw)
    appointment_id = int(match.group(1)) if match else 0
    if appointment_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid appointment ID")
    return appointment_id


@router.get("/schedules", response_model=list[ScheduleSchema])
def list_schedules(repo: ScheduleRepositoryPort = Depends(get_schedule_repository)):
    return [_to_schema(a) for a in repo.list_appointments()]


@router.post("/schedules", response_model=ScheduleSchema)
def create_schedule(
    req: ScheduleCreateSchema,
    repo: ScheduleRepositoryPort = Depends(get_schedule_repository),
):
    # ClientNotFoundError propagates to the 500 handler, like a foreign-key violation
    appointment = repo.create_appointment(
        AppointmentInput(
            client_id=req.client_id,
            appointment_time=req.appointment_time,
            end_time=req.end_time,
            description=req.description,
        )
    )
    logger.info("Appointment created", extra={"appointment_id": appointment.id, "client_id": appointment.client_id})
    return _to_schema(appointment)


@router.put("/schedules/{appointment_id}", response_model=ScheduleChangeSchema)
def update_schedule(
    appointment_id: str,
    req: ScheduleUpdateSchema,
    repo: ScheduleRepositoryPort = Depends(get_schedule_repository),
):
    schedule_id = _parse_id(appointment_id)
    if req.appointment_time is None:
        raise HTTPException(status_code=400, detail="Appointment time is required")

    fields: dict[str, Any] = {"appointment_time": req.appointment_time, "end_time": req.end_time}
    if req.client_id is not None:
        fields["client_id"] = req.client_id
    if "description" in req.model_fields_set:
        fields["description"] = req.description

    try:
        appointment = repo.update_appointment(schedule_id, fields)
    except AppointmentNotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")

    logger.info("Appointment updated", extra={"appointment_id": schedule_id})
    return ScheduleChangeSchema(message="Appointment updated successfully", appointment=_to_schema(appointment))


@router.delete("/schedules/{appointment_id}", response_model=ScheduleChangeSchema)
def delete_schedule(
    appointment_id: str,
    repo: ScheduleRepositoryPort = Depends(get_schedule_repository),
):
    schedule_id = _parse_id(appointment_id)
    try:
        appointment = repo.delete_appointment(schedule_id)
    except AppointmentNotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")

    logger.info("Appointment deleted", extra={"appointment_id": schedule_id})
    return ScheduleChangeSchema(message="Appointment deleted successfully", appointment=_to_schema(appointment))
