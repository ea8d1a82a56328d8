"""
End-to-end tests: calendar session -> HTTP store client -> schedule service.
"""

from __future__ import annotations

from datetime import datetime

import httpx
import pytest

from schedule_desk.application.use_cases.calendar_session import CalendarSession
from schedule_desk.application.use_cases.calendar_view import SurfaceGeometry
from schedule_desk.application.use_cases.dialogs import DialogCoordinator
from schedule_desk.application.use_cases.interaction import InteractionUseCase
from schedule_desk.domain.entities.appointment import AppointmentInput
from schedule_desk.domain.entities.client import ClientInput
from schedule_desk.domain.entities.interaction_event import (
    CreateSubmitted,
    DeleteConfirmed,
    DragStarted,
    EditSubmitted,
    EventClicked,
    EventDoubleClicked,
    EventDropped,
    FormFieldChanged,
    KeyPressed,
    SlotDoubleClicked,
)
from schedule_desk.domain.entities.interaction_state import DialogKind, MenuItem, Mode
from schedule_desk.infrastructure.schedule_api.schedule_api_client import ScheduleApiClient

TODAY = datetime(2024, 1, 10, 8, 0)


class RecordingApiClient(ScheduleApiClient):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.calls: list[tuple[str, str, dict | None]] = []

    def _request(self, method, path, json=None):
        self.calls.append((method, path, json))
        return super()._request(method, path, json=json)


@pytest.fixture
def store(http):
    return RecordingApiClient(base_url="http://testserver/api", client=http)


@pytest.fixture
def session(store):
    interaction = InteractionUseCase(dialogs=DialogCoordinator(), clock=lambda: TODAY)
    calendar = CalendarSession(
        store=store,
        interaction=interaction,
        geometry=SurfaceGeometry(width=700, height=40 + 24 * 60),
        clock=lambda: TODAY,
    )
    return calendar


def _book_ada(session, store) -> None:
    session.create_client(ClientInput(name="Ada", email="ada@x.com", phone="555"))
    store.create_appointment(
        AppointmentInput(
            client_id=1,
            appointment_time=datetime(2024, 1, 10, 9, 0),
            end_time=datetime(2024, 1, 10, 9, 30),
        )
    )
    session.load()


def test_created_client_can_be_referenced(session, store):
    """Create Ada -> id 1 -> a schedule for client_id 1 appears in the next fetch."""
    client = session.create_client(ClientInput(name="Ada", email="ada@x.com", phone="555"))

    assert client.id == 1
    assert store.calls[0] == ("POST", "/clients", {"name": "Ada", "email": "ada@x.com", "phone": "555"})
    assert [c.name for c in session.clients] == ["Ada"]

    store.create_appointment(AppointmentInput(client_id=1, appointment_time=datetime(2024, 1, 10, 9, 0)))
    session.refresh()
    assert session.appointments[0].client_id == 1
    assert session.events[0].title == "Ada - No description"


def test_double_click_slot_then_create(session, store):
    session.create_client(ClientInput(name="Ada", email="ada@x.com", phone="555"))
    session.load()

    session.dispatch(SlotDoubleClicked(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 30)))
    assert session.state.dialog is DialogKind.SCHEDULE_CREATE
    assert session.state.create_form.duration == "30"

    session.dispatch(FormFieldChanged("client_id", "1"))
    store.calls.clear()
    state = session.dispatch(CreateSubmitted())

    assert store.calls[0] == (
        "POST",
        "/schedules",
        {"client_id": 1, "appointment_time": "2024-01-10T09:00:00", "end_time": "2024-01-10T09:30:00"},
    )
    assert store.calls[1] == ("GET", "/schedules", None)
    assert state.mode is Mode.IDLE
    assert state.selected_slot_range is None
    assert len(session.events) == 1


def test_create_without_client_never_calls_store(session, store):
    session.load()
    session.dispatch(SlotDoubleClicked(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 30)))
    store.calls.clear()

    state = session.dispatch(CreateSubmitted())

    assert store.calls == []
    assert state.error == "Please select a client."


def test_create_for_unknown_client_keeps_dialog_open(session, store):
    session.load()
    session.dispatch(SlotDoubleClicked(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 30)))
    session.dispatch(FormFieldChanged("client_id", "99"))

    state = session.dispatch(CreateSubmitted())

    assert state.dialog is DialogKind.SCHEDULE_CREATE
    assert state.error == "Failed to schedule appointment."
    assert session.events == []


def test_drag_to_another_day(session, store):
    """Week-view drag Jan 10 09:00 -> Jan 12 09:00 sends the target times verbatim."""
    _book_ada(session, store)
    event = session.events[0]

    session.dispatch(DragStarted(event))
    store.calls.clear()
    state = session.dispatch(
        EventDropped(event, datetime(2024, 1, 12, 9, 0), datetime(2024, 1, 12, 9, 30), all_day=False)
    )

    assert store.calls[0] == (
        "PUT",
        "/schedules/1",
        {"client_id": 1, "appointment_time": "2024-01-12T09:00:00", "end_time": "2024-01-12T09:30:00"},
    )
    assert state.mode is Mode.IDLE
    assert session.events[0].start == datetime(2024, 1, 12, 9, 0)


def test_failed_move_surfaces_error_and_returns_to_idle(session, store, repository):
    _book_ada(session, store)
    event = session.events[0]
    repository.delete_appointment(event.id)

    session.dispatch(DragStarted(event))
    state = session.dispatch(EventDropped(event, datetime(2024, 1, 12, 9, 0), datetime(2024, 1, 12, 9, 30)))

    assert state.mode is Mode.IDLE
    assert state.error == "Failed to move appointment. Appointment not found"


def test_edit_round_trip(session, store):
    _book_ada(session, store)

    session.dispatch(EventDoubleClicked(session.events[0]))
    session.dispatch(FormFieldChanged("description", "Follow-up"))
    state = session.dispatch(EditSubmitted())

    assert state.mode is Mode.IDLE
    assert session.events[0].title == "Ada - Follow-up"


def test_delete_key_flow_removes_appointment(session, store):
    _book_ada(session, store)

    session.dispatch(EventClicked(session.events[0]))
    assert session.dispatch(KeyPressed("Delete")).dialog is DialogKind.DELETE_CONFIRM
    state = session.dispatch(DeleteConfirmed())

    assert state.mode is Mode.IDLE
    assert state.selected_appointment is None
    assert session.events == []


def test_right_click_hit_tests_appointment(session, store):
    _book_ada(session, store)

    # Jan 10 09:00 sits in the fourth column (x 300-400) at y 580-610
    state = session.right_click(370, 610, surface_left=20, surface_top=20)

    assert state.selected_appointment.id == 1
    assert state.context_menu.items == (MenuItem.EDIT, MenuItem.DELETE)
    assert state.context_menu.y == 640

    session.dispatch(EventClicked(session.events[0]))
    assert session.event_visual(session.events[0]).selected


def test_right_click_on_empty_surface(session, store):
    _book_ada(session, store)

    state = session.right_click(50, 100)

    assert state.selected_appointment is None
    assert state.context_menu.items == (MenuItem.SCHEDULE,)


def test_load_failure_sets_banner():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    unreachable = ScheduleApiClient(
        base_url="http://schedule.test/api", client=httpx.Client(transport=httpx.MockTransport(refuse))
    )
    interaction = InteractionUseCase(dialogs=DialogCoordinator(), clock=lambda: TODAY)
    session = CalendarSession(store=unreachable, interaction=interaction, clock=lambda: TODAY)

    session.load()

    assert session.state.error == "Failed to load schedules."


def test_unreadable_write_response_still_ends_drag():
    row = {
        "id": 1,
        "client_id": 1,
        "appointment_time": "2024-01-10T09:00:00",
        "end_time": "2024-01-10T09:30:00",
        "description": None,
        "client_name": "Ada",
    }

    def service(request: httpx.Request) -> httpx.Response:
        if request.method == "PUT":
            return httpx.Response(200, text="<html>ok</html>")
        if request.url.path.endswith("/clients"):
            return httpx.Response(200, json=[{"id": 1, "name": "Ada", "email": "", "phone": ""}])
        return httpx.Response(200, json=[row])

    flaky = ScheduleApiClient(
        base_url="http://schedule.test/api", client=httpx.Client(transport=httpx.MockTransport(service))
    )
    interaction = InteractionUseCase(dialogs=DialogCoordinator(), clock=lambda: TODAY)
    session = CalendarSession(store=flaky, interaction=interaction, clock=lambda: TODAY)
    session.load()
    event = session.events[0]

    session.dispatch(DragStarted(event))
    state = session.dispatch(EventDropped(event, datetime(2024, 1, 12, 9, 0), datetime(2024, 1, 12, 9, 30)))

    assert state.mode is Mode.IDLE
    assert state.dragging_appointment_id is None
    assert state.error == "Failed to move appointment. Invalid response from schedule service"
    assert session.dispatch(EventClicked(event)).selected_appointment == event
