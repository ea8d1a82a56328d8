from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from schedule_desk.domain.entities.appointment import AppointmentInput


class WriteOperation(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    MOVE = "move"
    RESIZE = "resize"
    DELETE = "delete"


@dataclass(frozen=True)
class CreateAppointment:
    payload: AppointmentInput
    operation: WriteOperation = WriteOperation.CREATE


@dataclass(frozen=True)
class UpdateAppointment:
    appointment_id: int
    payload: AppointmentInput
    operation: WriteOperation = WriteOperation.EDIT


@dataclass(frozen=True)
class DeleteAppointment:
    appointment_id: int
    operation: WriteOperation = WriteOperation.DELETE


Effect = CreateAppointment | UpdateAppointment | DeleteAppointment
