from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from schedule_desk.application.utils.time_utils import from_wire, to_wire
from schedule_desk.domain.entities.appointment import Appointment
from schedule_desk.domain.entities.client import Client
from schedule_desk.infrastructure.store.memory_store import MemoryScheduleRepository


class JsonScheduleRepository(MemoryScheduleRepository):
    """Memory repository that writes the whole roster and schedule to one JSON file after each change."""

    def __init__(self, data_dir: str = "./data", filename: str = "schedule.json") -> None:
        super().__init__()
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / filename
        self._persist_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self._load()

    def _load(self) -> None:
        if not self._file_path.exists():
            return
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            # corrupted file: start empty
            self._logger.error("Could not read schedule file", extra={"error": str(e)})
            return

        for row in data.get("clients", []):
            client = Client(id=row["id"], name=row["name"], email=row.get("email", ""), phone=row.get("phone", ""))
            self._clients[client.id] = client
        for row in data.get("schedules", []):
            appointment = self._deserialize_appointment(row)
            self._appointments[appointment.id] = appointment
        next_ids = data.get("next_ids", {})
        self._next_client_id = next_ids.get("clients", max(self._clients, default=0) + 1)
        self._next_appointment_id = next_ids.get("schedules", max(self._appointments, default=0) + 1)

    def _persist(self) -> None:
        """Save all data to the JSON file atomically."""
        # snapshot, write and rename must not interleave between writers
        with self._persist_lock:
            with self._lock:
                data = {
                    "version": 1,
                    "clients": [
                        {"id": c.id, "name": c.name, "email": c.email, "phone": c.phone}
                        for c in self._clients.values()
                    ],
                    "schedules": [self._serialize_appointment(a) for a in self._appointments.values()],
                    "next_ids": {"clients": self._next_client_id, "schedules": self._next_appointment_id},
                }
            temp_path = self._file_path.with_suffix(".json.tmp")
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                temp_path.replace(self._file_path)
            except Exception:
                if temp_path.exists():
                    temp_path.unlink()
                raise

    @staticmethod
    def _serialize_appointment(appointment: Appointment) -> dict[str, Any]:
        return {
            "id": appointment.id,
            "client_id": appointment.client_id,
            "appointment_time": to_wire(appointment.appointment_time),
            "end_time": to_wire(appointment.end_time) if appointment.end_time else None,
            "description": appointment.description,
        }

    @staticmethod
    def _deserialize_appointment(row: dict[str, Any]) -> Appointment:
        return Appointment(
            id=row["id"],
            client_id=row["client_id"],
            appointment_time=from_wire(row["appointment_time"]),
            end_time=from_wire(row["end_time"]) if row.get("end_time") else None,
            description=row.get("description"),
        )
