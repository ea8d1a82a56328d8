"""
Tests for the schedule REST service (clients and schedules under /api).
"""

from __future__ import annotations


def _seed(http) -> int:
    http.post("/api/clients", json={"name": "Ada", "email": "ada@x.com", "phone": "555"})
    created = http.post(
        "/api/schedules",
        json={
            "client_id": 1,
            "appointment_time": "2024-01-10T09:00:00",
            "end_time": "2024-01-10T09:30:00",
            "description": "Checkup",
        },
    )
    return created.json()["id"]


def test_health(http):
    assert http.get("/health").json() == {"status": "ok"}


def test_create_client_assigns_id(http):
    response = http.post("/api/clients", json={"name": "Ada", "email": "ada@x.com", "phone": "555"})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "name": "Ada", "email": "ada@x.com", "phone": "555"}
    assert http.get("/api/clients").json()[0]["name"] == "Ada"


def test_list_schedules_joins_client_name(http):
    _seed(http)

    rows = http.get("/api/schedules").json()

    assert rows == [
        {
            "id": 1,
            "client_id": 1,
            "appointment_time": "2024-01-10T09:00:00",
            "end_time": "2024-01-10T09:30:00",
            "description": "Checkup",
            "client_name": "Ada",
        }
    ]


def test_create_with_unknown_client_is_server_error(http):
    response = http.post("/api/schedules", json={"client_id": 99, "appointment_time": "2024-01-10T09:00:00"})

    assert response.status_code == 500
    assert "foreign key" in response.json()["error"]


def test_create_with_malformed_body_is_bad_request(http):
    response = http.post("/api/schedules", json={"client_id": 1})

    assert response.status_code == 400
    assert "appointment_time" in response.json()["error"]


def test_update_replaces_times_and_keeps_description(http):
    appointment_id = _seed(http)

    response = http.put(
        f"/api/schedules/{appointment_id}",
        json={"appointment_time": "2024-01-12T09:00:00", "end_time": "2024-01-12T09:30:00", "client_id": 1},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Appointment updated successfully"
    assert body["appointment"]["appointment_time"] == "2024-01-12T09:00:00"
    assert body["appointment"]["description"] == "Checkup"


def test_update_without_end_time_clears_it(http):
    appointment_id = _seed(http)

    body = http.put(f"/api/schedules/{appointment_id}", json={"appointment_time": "2024-01-12T09:00:00"}).json()

    assert body["appointment"]["end_time"] is None
    assert body["appointment"]["client_id"] == 1


def test_update_requires_appointment_time(http):
    appointment_id = _seed(http)

    response = http.put(f"/api/schedules/{appointment_id}", json={"end_time": "2024-01-12T09:30:00"})

    assert response.status_code == 400
    assert response.json() == {"error": "Appointment time is required"}


def test_invalid_and_unknown_ids(http):
    _seed(http)
    body = {"appointment_time": "2024-01-12T09:00:00"}

    assert http.put("/api/schedules/abc", json=body).json() == {"error": "Invalid appointment ID"}
    assert http.put("/api/schedules/0", json=body).status_code == 400
    assert http.delete("/api/schedules/-3").status_code == 400

    missing = http.put("/api/schedules/42", json=body)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Appointment not found"}
    assert http.delete("/api/schedules/42").status_code == 404


def test_delete_returns_deleted_appointment(http):
    appointment_id = _seed(http)

    response = http.delete(f"/api/schedules/{appointment_id}")

    assert response.status_code == 200
    assert response.json()["message"] == "Appointment deleted successfully"
    assert response.json()["appointment"]["id"] == appointment_id
    assert http.get("/api/schedules").json() == []


def test_id_uses_leading_integer(http):
    appointment_id = _seed(http)
    body = {"appointment_time": "2024-01-12T09:00:00"}

    assert http.put(f"/api/schedules/{appointment_id}.5", json=body).status_code == 200
    assert http.put(f"/api/schedules/{appointment_id}abc", json=body).json()["appointment"]["id"] == appointment_id
    assert http.delete("/api/schedules/0.9").status_code == 400
