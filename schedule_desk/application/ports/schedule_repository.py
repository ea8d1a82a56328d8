from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from schedule_desk.domain.entities.appointment import Appointment, AppointmentInput
from schedule_desk.domain.entities.client import Client, ClientInput


class ScheduleRepositoryPort(ABC):
    """Server-side persistence of the client roster and appointments."""

    @abstractmethod
    def list_clients(self) -> list[Client]:
        raise NotImplementedError

    @abstractmethod
    def create_client(self, data: ClientInput) -> Client:
        raise NotImplementedError

    @abstractmethod
    def list_appointments(self) -> list[Appointment]:
        """Appointments joined with client_name, ordered by start time then id."""
        raise NotImplementedError

    @abstractmethod
    def create_appointment(self, data: AppointmentInput) -> Appointment:
        """Raises ClientNotFoundError if client_id does not reference a client."""
        raise NotImplementedError

    @abstractmethod
    def update_appointment(self, appointment_id: int, fields: dict[str, Any]) -> Appointment:
        """Overwrite the given fields. Raises AppointmentNotFoundError or ClientNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def delete_appointment(self, appointment_id: int) -> Appointment:
        """Raises AppointmentNotFoundError if absent."""
        raise NotImplementedError
