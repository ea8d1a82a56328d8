from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime

from schedule_desk.application.exceptions import FormValidationError
from schedule_desk.application.utils.time_utils import (
    format_display,
    format_long_display,
    minutes_between,
    parse_input,
    to_input,
)
from schedule_desk.domain.entities.appointment import AppointmentInput
from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.interaction_state import (
    CreateForm,
    DialogKind,
    EditForm,
    InteractionState,
    Mode,
    SlotRange,
)


@dataclass(frozen=True)
class ScheduleDialogView:
    start: str
    end: str
    duration_minutes: int


@dataclass(frozen=True)
class EditDialogView:
    current_start: str
    current_end: str


@dataclass(frozen=True)
class DeleteDialogView:
    prompt: str


class DialogCoordinator:
    """Opens and closes the three modal flows and validates their forms.

    At most one dialog is open at a time, and opening one closes the context menu.
    """

    def __init__(self, enforce_end_after_start: bool = False) -> None:
        self._enforce_end_after_start = enforce_end_after_start
        self._logger = logging.getLogger(__name__)

    def can_open(self, state: InteractionState) -> bool:
        return state.mode not in (Mode.DIALOG_OPEN, Mode.DRAGGING, Mode.RESIZING)

    def open(self, state: InteractionState, kind: DialogKind, **changes) -> InteractionState:
        if not self.can_open(state):
            self._logger.info(
                "Dialog open ignored", extra={"mode": state.mode.value, "operation": kind.value}
            )
            return state
        return replace(state, mode=Mode.DIALOG_OPEN, dialog=kind, context_menu=None, **changes)

    def close(self, state: InteractionState) -> InteractionState:
        """Close whichever dialog is open and discard its form."""
        if state.dialog is DialogKind.SCHEDULE_CREATE:
            state = replace(state, create_form=CreateForm())
        elif state.dialog is DialogKind.EDIT:
            state = replace(state, edit_form=EditForm())
        return replace(state, mode=Mode.IDLE, dialog=None)

    def seed_create_form(self, slot: SlotRange) -> CreateForm:
        return CreateForm(
            appointment_time=to_input(slot.start),
            duration=str(minutes_between(slot.start, slot.end)),
        )

    def seed_edit_form(self, event: CalendarEvent) -> EditForm:
        return EditForm(
            client_id=str(event.client_id) if event.client_id else "",
            appointment_time=to_input(event.start),
            end_time=to_input(event.end) if event.end else "",
            description=event.description or "",
        )

    def apply_field(self, state: InteractionState, field: str, value: str) -> InteractionState:
        if state.dialog is DialogKind.SCHEDULE_CREATE:
            attr, form = "create_form", state.create_form
        elif state.dialog is DialogKind.EDIT:
            attr, form = "edit_form", state.edit_form
        else:
            return state
        if field not in {f.name for f in fields(form)}:
            self._logger.warning("Unknown form field", extra={"error": field})
            return state
        return replace(state, **{attr: replace(form, **{field: value})})

    def build_create_payload(self, state: InteractionState) -> AppointmentInput:
        client_id = _parse_client_id(state.create_form.client_id)
        if client_id is None:
            raise FormValidationError("Please select a client.")
        slot = state.selected_slot_range
        if slot is None:
            raise FormValidationError("Please select a time slot.")
        self._check_order(slot.start, slot.end)
        return AppointmentInput(
            client_id=client_id,
            appointment_time=slot.start,
            end_time=slot.end,
            description=state.create_form.description or None,
        )

    def build_edit_payload(self, state: InteractionState) -> AppointmentInput:
        form = state.edit_form
        client_id = _parse_client_id(form.client_id)
        if client_id is None or not form.appointment_time.strip():
            raise FormValidationError("Client and appointment time are required.")
        start = parse_input(form.appointment_time)
        if start is None:
            raise FormValidationError("Invalid appointment time.")
        end = parse_input(form.end_time)
        if form.end_time.strip() and end is None:
            raise FormValidationError("Invalid end time.")
        self._check_order(start, end)
        return AppointmentInput(
            client_id=client_id,
            appointment_time=start,
            end_time=end,
            description=form.description,
        )

    def _check_order(self, start: datetime, end: datetime | None) -> None:
        if self._enforce_end_after_start and end is not None and end < start:
            raise FormValidationError("End time must be after start time.")

    def schedule_view(self, state: InteractionState) -> ScheduleDialogView | None:
        slot = state.selected_slot_range
        if state.dialog is not DialogKind.SCHEDULE_CREATE or slot is None:
            return None
        return ScheduleDialogView(
            start=format_display(slot.start),
            end=format_display(slot.end) if slot.end else "N/A",
            duration_minutes=minutes_between(slot.start, slot.end) if slot.end else 0,
        )

    def edit_view(self, state: InteractionState) -> EditDialogView | None:
        event = state.selected_appointment
        if state.dialog is not DialogKind.EDIT or event is None:
            return None
        return EditDialogView(
            current_start=format_display(event.start),
            current_end=format_display(event.end) if event.end else "N/A",
        )

    def delete_view(self, state: InteractionState) -> DeleteDialogView | None:
        event = state.selected_appointment
        if state.dialog is not DialogKind.DELETE_CONFIRM or event is None:
            return None
        return DeleteDialogView(
            prompt=(
                f'Are you sure you want to delete the appointment for "{event.title}" '
                f"on {format_long_display(event.start)}?"
            )
        )


def _parse_client_id(raw: str) -> int | None:
    raw = (raw or "").strip()
    if not raw.isdigit() or int(raw) <= 0:
        return None
    return int(raw)
