from __future__ import annotations

from abc import ABC, abstractmethod

from schedule_desk.domain.entities.appointment import Appointment, AppointmentInput
from schedule_desk.domain.entities.client import Client, ClientInput


class AppointmentStorePort(ABC):
    """Remote CRUD surface for clients and appointments. Failures raise StoreError."""

    @abstractmethod
    def list_appointments(self) -> list[Appointment]:
        """Fetch every appointment, joined with its client name."""
        raise NotImplementedError

    @abstractmethod
    def list_clients(self) -> list[Client]:
        raise NotImplementedError

    @abstractmethod
    def create_appointment(self, data: AppointmentInput) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    def update_appointment(self, appointment_id: int, data: AppointmentInput) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    def delete_appointment(self, appointment_id: int) -> Appointment:
        """Delete an appointment. Returns the deleted appointment."""
        raise NotImplementedError

    @abstractmethod
    def create_client(self, data: ClientInput) -> Client:
        raise NotImplementedError
