from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any

from schedule_desk.application.exceptions import AppointmentNotFoundError, ClientNotFoundError
from schedule_desk.application.ports.schedule_repository import ScheduleRepositoryPort
from schedule_desk.domain.entities.appointment import Appointment, AppointmentInput
from schedule_desk.domain.entities.client import Client, ClientInput

UPDATABLE_FIELDS = ("appointment_time", "end_time", "client_id", "description")


class MemoryScheduleRepository(ScheduleRepositoryPort):
    def __init__(self) -> None:
        self._clients: dict[int, Client] = {}
        self._appointments: dict[int, Appointment] = {}
        self._next_client_id = 1
        self._next_appointment_id = 1
        self._lock = threading.Lock()

    def list_clients(self) -> list[Client]:
        with self._lock:
            return sorted(self._clients.values(), key=lambda c: c.id)

    def create_client(self, data: ClientInput) -> Client:
        with self._lock:
            client = Client(id=self._next_client_id, name=data.name, email=data.email, phone=data.phone)
            self._clients[client.id] = client
            self._next_client_id += 1
        self._persist()
        return client

    def list_appointments(self) -> list[Appointment]:
        with self._lock:
            joined = [
                replace(a, client_name=self._clients[a.client_id].name if a.client_id in self._clients else None)
                for a in self._appointments.values()
            ]
        return sorted(joined, key=lambda a: (a.appointment_time, a.id))

    def create_appointment(self, data: AppointmentInput) -> Appointment:
        with self._lock:
            self._require_client(data.client_id)
            appointment = Appointment(
                id=self._next_appointment_id,
                client_id=data.client_id,
                appointment_time=data.appointment_time,
                end_time=data.end_time,
                description=data.description,
            )
            self._appointments[appointment.id] = appointment
            self._next_appointment_id += 1
        self._persist()
        return appointment

    def update_appointment(self, appointment_id: int, fields: dict[str, Any]) -> Appointment:
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")
            if "client_id" in changes:
                self._require_client(changes["client_id"])
            updated = replace(current, **changes)
            self._appointments[appointment_id] = updated
        self._persist()
        return updated

    def delete_appointment(self, appointment_id: int) -> Appointment:
        with self._lock:
            removed = self._appointments.pop(appointment_id, None)
            if removed is None:
                raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")
        self._persist()
        return removed

    def _require_client(self, client_id: int | None) -> None:
        if client_id not in self._clients:
            raise ClientNotFoundError(
                f'insert or update on table "schedules" violates foreign key constraint: '
                f"client_id={client_id} is not present in table \"clients\""
            )

    def _persist(self) -> None:
        """Hook for durable subclasses; in-memory state needs no flush."""
