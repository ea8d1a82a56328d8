"""
Tests for the dialog coordinator: seeding, validation and rendered dialog text.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from schedule_desk.application.exceptions import FormValidationError
from schedule_desk.application.use_cases.dialogs import DialogCoordinator
from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.interaction_state import (
    CreateForm,
    DialogKind,
    EditForm,
    InteractionState,
    Mode,
    SlotRange,
)

APPOINTMENT = CalendarEvent(
    id=3,
    title="Ada - No description",
    start=datetime(2024, 1, 10, 9, 0),
    end=None,
    client_id=1,
)


def test_schedule_view_shows_start_end_and_duration():
    """The create dialog is pre-filled from the slot: Start=Jan 10 9:00 AM, Duration=30."""
    dialogs = DialogCoordinator()
    slot = SlotRange(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 30))
    state = dialogs.open(InteractionState(), DialogKind.SCHEDULE_CREATE, selected_slot_range=slot)

    view = dialogs.schedule_view(state)

    assert view.start == "Jan 10, 2024 9:00 AM"
    assert view.end == "Jan 10, 2024 9:30 AM"
    assert view.duration_minutes == 30


def test_edit_view_marks_missing_end():
    dialogs = DialogCoordinator()
    state = dialogs.open(InteractionState(selected_appointment=APPOINTMENT), DialogKind.EDIT)

    view = dialogs.edit_view(state)

    assert view.current_start == "Jan 10, 2024 9:00 AM"
    assert view.current_end == "N/A"


def test_delete_view_prompt():
    dialogs = DialogCoordinator()
    state = dialogs.open(InteractionState(selected_appointment=APPOINTMENT), DialogKind.DELETE_CONFIRM)

    assert dialogs.delete_view(state).prompt == (
        'Are you sure you want to delete the appointment for "Ada - No description" on January 10, 2024 9:00 AM?'
    )
    assert dialogs.schedule_view(state) is None


def test_only_one_dialog_at_a_time():
    dialogs = DialogCoordinator()
    state = dialogs.open(InteractionState(), DialogKind.EDIT)

    again = dialogs.open(state, DialogKind.DELETE_CONFIRM)

    assert again is state
    assert again.dialog is DialogKind.EDIT


def test_dialog_not_opened_during_drag():
    dialogs = DialogCoordinator()
    state = InteractionState(mode=Mode.DRAGGING)
    assert dialogs.open(state, DialogKind.SCHEDULE_CREATE) is state


def test_seed_edit_form_without_end_or_description():
    form = DialogCoordinator().seed_edit_form(APPOINTMENT)
    assert form == EditForm(client_id="1", appointment_time="2024-01-10T09:00", end_time="", description="")


def test_apply_field_ignores_unknown_fields_and_closed_dialogs():
    dialogs = DialogCoordinator()
    closed = InteractionState()
    assert dialogs.apply_field(closed, "client_id", "2") is closed

    state = dialogs.open(InteractionState(), DialogKind.SCHEDULE_CREATE)
    assert dialogs.apply_field(state, "colour", "red") is state
    assert dialogs.apply_field(state, "description", "Intro call").create_form.description == "Intro call"


def test_create_payload_rejects_non_numeric_client():
    dialogs = DialogCoordinator()
    state = InteractionState(
        selected_slot_range=SlotRange(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 30)),
        create_form=CreateForm(client_id="abc"),
    )
    with pytest.raises(FormValidationError, match="Please select a client."):
        dialogs.build_create_payload(state)

    payload = dialogs.build_create_payload(replace(state, create_form=CreateForm(client_id="4", description="x")))
    assert payload.client_id == 4
    assert payload.description == "x"


def test_edit_payload_rejects_malformed_time():
    dialogs = DialogCoordinator()
    state = InteractionState(edit_form=EditForm(client_id="1", appointment_time="tomorrow"))
    with pytest.raises(FormValidationError, match="Invalid appointment time."):
        dialogs.build_edit_payload(state)


def test_close_discards_only_the_open_form():
    dialogs = DialogCoordinator()
    state = dialogs.open(
        InteractionState(edit_form=EditForm(client_id="9")),
        DialogKind.SCHEDULE_CREATE,
        create_form=CreateForm(client_id="1"),
    )

    closed = dialogs.close(state)

    assert closed.mode is Mode.IDLE
    assert closed.create_form == CreateForm()
    assert closed.edit_form.client_id == "9"
