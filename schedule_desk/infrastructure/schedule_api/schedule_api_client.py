from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from schedule_desk.application.exceptions import (
    StoreError,
    StoreNetworkError,
    StoreNotFoundError,
    StoreValidationError,
)
from schedule_desk.application.ports.appointment_store import AppointmentStorePort
from schedule_desk.application.utils.time_utils import from_wire, to_wire
from schedule_desk.core.config import settings
from schedule_desk.domain.entities.appointment import Appointment, AppointmentInput
from schedule_desk.domain.entities.client import Client, ClientInput

T = TypeVar("T")


class ScheduleApiClient(AppointmentStorePort):
    """Store client for the schedule REST service. No retries: every failure raises StoreError."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout or settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def list_appointments(self) -> list[Appointment]:
        data = self._request("GET", "/schedules")
        return self._decode("GET /schedules", lambda rows: [appointment_from_wire(row) for row in rows], data)

    def list_clients(self) -> list[Client]:
        data = self._request("GET", "/clients")
        return self._decode("GET /clients", lambda rows: [client_from_wire(row) for row in rows], data)

    def create_appointment(self, data: AppointmentInput) -> Appointment:
        created = self._request("POST", "/schedules", json=appointment_to_wire(data))
        appointment = self._decode("POST /schedules", appointment_from_wire, created)
        self._logger.info(
            "Appointment created",
            extra={"appointment_id": appointment.id, "client_id": appointment.client_id},
        )
        return appointment

    def update_appointment(self, appointment_id: int, data: AppointmentInput) -> Appointment:
        body = self._request("PUT", f"/schedules/{appointment_id}", json=appointment_to_wire(data))
        self._logger.info("Appointment updated", extra={"appointment_id": appointment_id})
        return self._decode("PUT /schedules", _unwrap_appointment, body)

    def delete_appointment(self, appointment_id: int) -> Appointment:
        body = self._request("DELETE", f"/schedules/{appointment_id}")
        self._logger.info("Appointment deleted", extra={"appointment_id": appointment_id})
        return self._decode("DELETE /schedules", _unwrap_appointment, body)

    def create_client(self, data: ClientInput) -> Client:
        payload = {"name": data.name, "email": data.email, "phone": data.phone}
        client = self._decode("POST /clients", client_from_wire, self._request("POST", "/clients", json=payload))
        self._logger.info("Client created", extra={"client_id": client.id})
        return client

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = _error_message(e.response)
            self._logger.error(
                "Schedule service rejected request",
                extra={"operation": f"{method} {path}", "status_code": status, "error": message},
            )
            if status == 400:
                raise StoreValidationError(message, status) from e
            if status == 404:
                raise StoreNotFoundError(message, status) from e
            raise StoreError(message, status) from e
        except httpx.RequestError as e:
            self._logger.error(
                "Schedule service unreachable",
                extra={"operation": f"{method} {path}", "error": str(e)},
            )
            raise StoreNetworkError(str(e) or type(e).__name__) from e

        try:
            return response.json()
        except ValueError as e:
            self._logger.error(
                "Schedule service sent a non-JSON body",
                extra={"operation": f"{method} {path}", "status_code": response.status_code},
            )
            raise StoreError("Invalid response from schedule service", response.status_code) from e

    def _decode(self, operation: str, parse: Callable[[Any], T], body: Any) -> T:
        try:
            return parse(body)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            self._logger.error(
                "Schedule service sent a malformed record",
                extra={"operation": operation, "error": repr(e)},
            )
            raise StoreError("Invalid response from schedule service") from e


def _unwrap_appointment(body: dict[str, Any]) -> Appointment:
    return appointment_from_wire(body.get("appointment", body))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase


def appointment_to_wire(data: AppointmentInput) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "client_id": data.client_id,
        "appointment_time": to_wire(data.appointment_time),
        "end_time": to_wire(data.end_time) if data.end_time else None,
    }
    if data.description is not None:
        payload["description"] = data.description
    return payload


def appointment_from_wire(row: dict[str, Any]) -> Appointment:
    end_time = row.get("end_time")
    return Appointment(
        id=int(row["id"]),
        client_id=int(row["client_id"]),
        appointment_time=from_wire(row["appointment_time"]),
        end_time=from_wire(end_time) if end_time else None,
        description=row.get("description"),
        client_name=row.get("client_name"),
    )


def client_from_wire(row: dict[str, Any]) -> Client:
    return Client(
        id=int(row["id"]),
        name=row.get("name") or "",
        email=row.get("email") or "",
        phone=row.get("phone") or "",
    )
