from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from schedule_desk.application.exceptions import FormValidationError
from schedule_desk.application.use_cases.calendar_view import navigate_date
from schedule_desk.application.use_cases.dialogs import DialogCoordinator
from schedule_desk.application.utils.time_utils import (
    carry_time_of_day,
    end_of_day,
    enumerate_slots,
    minutes_between,
    start_of_day,
    to_input,
)
from schedule_desk.domain.entities.appointment import AppointmentInput
from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.effect import (
    CreateAppointment,
    DeleteAppointment,
    Effect,
    UpdateAppointment,
    WriteOperation,
)
from schedule_desk.domain.entities.interaction_event import (
    AppointmentsRefreshed,
    ContextMenuDismissed,
    ContextMenuRequested,
    CreateSubmitted,
    DeleteConfirmed,
    DialogCancelled,
    DragEnded,
    DragStarted,
    EditSubmitted,
    ErrorDismissed,
    EventClicked,
    EventDoubleClicked,
    EventDropped,
    EventResized,
    FormFieldChanged,
    InteractionEvent,
    KeyPressed,
    MenuItemChosen,
    ResizeStarted,
    SlotClicked,
    SlotDoubleClicked,
    SlotSelectionStarted,
    StoreLoadFailed,
    ViewChanged,
    WriteFailed,
    WriteSucceeded,
)
from schedule_desk.domain.entities.interaction_state import (
    ContextMenu,
    CreateForm,
    DialogKind,
    EditForm,
    InteractionState,
    MenuItem,
    Mode,
    SlotRange,
    View,
)

DELETE_KEY = "Delete"

_FAILURE_MESSAGES = {
    WriteOperation.CREATE: "Failed to schedule appointment.",
    WriteOperation.EDIT: "Failed to update appointment.",
    WriteOperation.MOVE: "Failed to move appointment.",
    WriteOperation.RESIZE: "Failed to resize appointment.",
    WriteOperation.DELETE: "Failed to delete appointment.",
}

# Failures whose message carries the store's error detail.
_DETAILED_FAILURES = {WriteOperation.EDIT, WriteOperation.MOVE, WriteOperation.RESIZE}

_OPERATION_DIALOGS = {
    WriteOperation.CREATE: DialogKind.SCHEDULE_CREATE,
    WriteOperation.EDIT: DialogKind.EDIT,
    WriteOperation.DELETE: DialogKind.DELETE_CONFIRM,
}


@dataclass(frozen=True)
class InteractionResult:
    updated_state: InteractionState
    effects: tuple[Effect, ...] = ()


class InteractionUseCase:
    """Turn calendar input events into state transitions and store effects.

    `process` is a pure function of (state, event): it never talks to the store,
    it only describes the writes to perform. The caller runs the effects and
    reports back with WriteSucceeded / WriteFailed.
    """

    def __init__(
        self,
        dialogs: DialogCoordinator,
        slot_minutes: int = 30,
        menu_offset_y: float = 50,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._dialogs = dialogs
        self._slot_minutes = slot_minutes
        self._menu_offset_y = menu_offset_y
        self._clock = clock
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[type, Callable[[InteractionState, object], InteractionResult]] = {
            SlotSelectionStarted: self._on_slot_selection_started,
            SlotClicked: self._on_slot_clicked,
            SlotDoubleClicked: self._on_slot_double_clicked,
            EventClicked: self._on_event_clicked,
            EventDoubleClicked: self._on_event_double_clicked,
            ContextMenuRequested: self._on_context_menu_requested,
            ContextMenuDismissed: self._on_context_menu_dismissed,
            MenuItemChosen: self._on_menu_item_chosen,
            KeyPressed: self._on_key_pressed,
            DragStarted: self._on_drag_started,
            ResizeStarted: self._on_resize_started,
            DragEnded: self._on_drag_ended,
            EventDropped: self._on_event_dropped,
            EventResized: self._on_event_resized,
            ViewChanged: self._on_view_changed,
            FormFieldChanged: self._on_form_field_changed,
            DialogCancelled: self._on_dialog_cancelled,
            CreateSubmitted: self._on_create_submitted,
            EditSubmitted: self._on_edit_submitted,
            DeleteConfirmed: self._on_delete_confirmed,
            WriteSucceeded: self._on_write_succeeded,
            WriteFailed: self._on_write_failed,
            AppointmentsRefreshed: self._on_appointments_refreshed,
            StoreLoadFailed: self._on_store_load_failed,
            ErrorDismissed: self._on_error_dismissed,
        }

    def process(self, state: InteractionState, event: InteractionEvent) -> InteractionResult:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported interaction event: {type(event).__name__}")
        return handler(state, event)

    # -- guards -----------------------------------------------------------

    def _surface_blocked(self, state: InteractionState, event: object) -> bool:
        """Surface input is dropped while dragging/resizing or behind a modal dialog."""
        if state.mode in (Mode.DRAGGING, Mode.RESIZING, Mode.DIALOG_OPEN):
            self._logger.debug(
                "Surface event ignored",
                extra={"mode": state.mode.value, "operation": type(event).__name__},
            )
            return True
        return False

    @staticmethod
    def _settle(state: InteractionState) -> InteractionState:
        """Back to Idle from a transient surface mode (open menu, rubber-band selection)."""
        if state.mode in (Mode.CONTEXT_MENU_OPEN, Mode.SLOT_SELECTING):
            return replace(state, mode=Mode.IDLE, context_menu=None)
        return state

    # -- slots ------------------------------------------------------------

    def _on_slot_selection_started(self, state: InteractionState, event: SlotSelectionStarted) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        return InteractionResult(replace(state, mode=Mode.SLOT_SELECTING, context_menu=None))

    def _on_slot_clicked(self, state: InteractionState, event: SlotClicked) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        state = self._settle(state)
        if state.view is View.MONTH:
            return InteractionResult(replace(state, highlighted_day=start_of_day(event.start).date()))
        return InteractionResult(self._select_slot(state, event.start, event.end))

    def _select_slot(self, state: InteractionState, start: datetime, end: datetime) -> InteractionState:
        return replace(
            state,
            selected_appointment=None,
            selected_slot_range=SlotRange(start, end),
            highlighted_slots=enumerate_slots(start, end, self._slot_minutes),
            create_form=replace(
                state.create_form,
                appointment_time=to_input(start),
                duration=str(minutes_between(start, end)),
            ),
        )

    def _on_slot_double_clicked(self, state: InteractionState, event: SlotDoubleClicked) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        state = self._settle(state)
        if state.view is View.MONTH:
            state = replace(state, selected_slot_range=SlotRange(start_of_day(event.start), end_of_day(event.start)))
        else:
            state = self._select_slot(state, event.start, event.end)
        return InteractionResult(self._open_create(state, state.selected_slot_range))

    def _open_create(self, state: InteractionState, slot: SlotRange) -> InteractionState:
        return self._dialogs.open(
            state,
            DialogKind.SCHEDULE_CREATE,
            selected_slot_range=slot,
            create_form=self._dialogs.seed_create_form(slot),
        )

    # -- appointments -----------------------------------------------------

    def _on_event_clicked(self, state: InteractionState, event: EventClicked) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        return InteractionResult(replace(self._settle(state), selected_appointment=event.event))

    def _on_event_double_clicked(self, state: InteractionState, event: EventDoubleClicked) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        state = replace(self._settle(state), selected_appointment=event.event)
        return InteractionResult(self._open_edit(state, event.event))

    def _open_edit(self, state: InteractionState, appointment: CalendarEvent) -> InteractionState:
        return self._dialogs.open(state, DialogKind.EDIT, edit_form=self._dialogs.seed_edit_form(appointment))

    # -- context menu -----------------------------------------------------

    def _on_context_menu_requested(self, state: InteractionState, event: ContextMenuRequested) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        selected = state.selected_appointment or event.target
        items = (MenuItem.EDIT, MenuItem.DELETE) if selected else (MenuItem.SCHEDULE,)
        menu = ContextMenu(
            x=event.client_x - event.surface_left,
            y=event.client_y - event.surface_top + self._menu_offset_y,
            items=items,
        )
        return InteractionResult(
            replace(
                state,
                mode=Mode.CONTEXT_MENU_OPEN,
                context_menu=menu,
                selected_slot_range=None,
                selected_appointment=selected,
            )
        )

    def _on_context_menu_dismissed(self, state: InteractionState, event: ContextMenuDismissed) -> InteractionResult:
        if state.mode is not Mode.CONTEXT_MENU_OPEN:
            return InteractionResult(state)
        return InteractionResult(replace(state, mode=Mode.IDLE, context_menu=None))

    def _on_menu_item_chosen(self, state: InteractionState, event: MenuItemChosen) -> InteractionResult:
        menu = state.context_menu
        if state.mode is not Mode.CONTEXT_MENU_OPEN or menu is None or event.item not in menu.items:
            self._logger.info("Menu action ignored", extra={"mode": state.mode.value, "operation": event.item.value})
            return InteractionResult(state)
        state = self._settle(state)

        if event.item is MenuItem.SCHEDULE:
            slot = state.selected_slot_range
            if slot is None:
                start = self._clock()
                slot = SlotRange(start, start + timedelta(minutes=self._slot_minutes))
            return InteractionResult(self._open_create(state, slot))

        if state.selected_appointment is None:
            action = "editing" if event.item is MenuItem.EDIT else "deletion"
            return InteractionResult(replace(state, error=f"No appointment selected for {action}."))

        if event.item is MenuItem.EDIT:
            return InteractionResult(self._open_edit(state, state.selected_appointment))
        return InteractionResult(self._dialogs.open(state, DialogKind.DELETE_CONFIRM))

    def _on_key_pressed(self, state: InteractionState, event: KeyPressed) -> InteractionResult:
        if event.key != DELETE_KEY or state.selected_appointment is None:
            return InteractionResult(state)
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        return InteractionResult(self._dialogs.open(self._settle(state), DialogKind.DELETE_CONFIRM))

    # -- drag and resize --------------------------------------------------

    def _on_drag_started(self, state: InteractionState, event: DragStarted) -> InteractionResult:
        return self._begin_gesture(state, event, event.event, Mode.DRAGGING)

    def _on_resize_started(self, state: InteractionState, event: ResizeStarted) -> InteractionResult:
        return self._begin_gesture(state, event, event.event, Mode.RESIZING)

    def _begin_gesture(
        self, state: InteractionState, event: object, appointment: CalendarEvent, mode: Mode
    ) -> InteractionResult:
        if self._surface_blocked(state, event):
            return InteractionResult(state)
        state = self._settle(state)
        return InteractionResult(replace(state, mode=mode, dragging_appointment_id=appointment.id))

    def _on_drag_ended(self, state: InteractionState, event: DragEnded) -> InteractionResult:
        if state.mode not in (Mode.DRAGGING, Mode.RESIZING):
            return InteractionResult(state)
        return InteractionResult(replace(state, mode=Mode.IDLE, dragging_appointment_id=None))

    def _on_event_dropped(self, state: InteractionState, event: EventDropped) -> InteractionResult:
        return self._reschedule(state, event.event, event.start, event.end, event.all_day, WriteOperation.MOVE)

    def _on_event_resized(self, state: InteractionState, event: EventResized) -> InteractionResult:
        return self._reschedule(state, event.event, event.start, event.end, event.all_day, WriteOperation.RESIZE)

    def _reschedule(
        self,
        state: InteractionState,
        appointment: CalendarEvent,
        start: datetime,
        end: datetime,
        all_day: bool,
        operation: WriteOperation,
    ) -> InteractionResult:
        if state.mode is Mode.DIALOG_OPEN:
            return InteractionResult(state)
        # Row-format targets (month cells, multi-day spans) move the day, not the time.
        # A one-day all-day row in Week/Day view is taken as an explicit midnight-to-midnight booking.
        if all_day and (state.view is View.MONTH or (end - start).days > 1):
            original_end = appointment.end or appointment.start + timedelta(minutes=self._slot_minutes)
            start = carry_time_of_day(start, appointment.start)
            end = carry_time_of_day(end, original_end)

        payload = AppointmentInput(client_id=appointment.client_id, appointment_time=start, end_time=end)
        mode = Mode.RESIZING if operation is WriteOperation.RESIZE else Mode.DRAGGING
        return InteractionResult(
            replace(self._settle(state), mode=mode, dragging_appointment_id=appointment.id),
            (UpdateAppointment(appointment.id, payload, operation),),
        )

    # -- view -------------------------------------------------------------

    def _on_view_changed(self, state: InteractionState, event: ViewChanged) -> InteractionResult:
        anchor = navigate_date(event.view, event.date, state.highlighted_day)
        return InteractionResult(replace(state, view=event.view, anchor_date=anchor))

    # -- dialogs ----------------------------------------------------------

    def _on_form_field_changed(self, state: InteractionState, event: FormFieldChanged) -> InteractionResult:
        return InteractionResult(self._dialogs.apply_field(state, event.field, event.value))

    def _on_dialog_cancelled(self, state: InteractionState, event: DialogCancelled) -> InteractionResult:
        if state.mode is not Mode.DIALOG_OPEN:
            return InteractionResult(state)
        return InteractionResult(self._dialogs.close(state))

    def _on_create_submitted(self, state: InteractionState, event: CreateSubmitted) -> InteractionResult:
        if state.dialog is not DialogKind.SCHEDULE_CREATE:
            return InteractionResult(state)
        try:
            payload = self._dialogs.build_create_payload(state)
        except FormValidationError as e:
            return InteractionResult(replace(state, error=str(e)))
        return InteractionResult(state, (CreateAppointment(payload),))

    def _on_edit_submitted(self, state: InteractionState, event: EditSubmitted) -> InteractionResult:
        if state.dialog is not DialogKind.EDIT:
            return InteractionResult(state)
        if state.selected_appointment is None:
            return InteractionResult(replace(state, error="No appointment selected for editing."))
        try:
            payload = self._dialogs.build_edit_payload(state)
        except FormValidationError as e:
            return InteractionResult(replace(state, error=str(e)))
        return InteractionResult(state, (UpdateAppointment(state.selected_appointment.id, payload),))

    def _on_delete_confirmed(self, state: InteractionState, event: DeleteConfirmed) -> InteractionResult:
        if state.dialog is not DialogKind.DELETE_CONFIRM:
            return InteractionResult(state)
        if state.selected_appointment is None or not state.selected_appointment.id:
            return InteractionResult(replace(state, error="No appointment selected for deletion."))
        return InteractionResult(state, (DeleteAppointment(state.selected_appointment.id),))

    # -- store outcomes ---------------------------------------------------

    def _on_write_succeeded(self, state: InteractionState, event: WriteSucceeded) -> InteractionResult:
        op = event.operation
        if op in (WriteOperation.MOVE, WriteOperation.RESIZE):
            return InteractionResult(self._end_gesture(state))

        if state.dialog is _OPERATION_DIALOGS[op]:
            state = self._dialogs.close(state)
        if op is WriteOperation.CREATE:
            state = replace(state, create_form=CreateForm(), selected_slot_range=None, highlighted_slots=())
        elif op is WriteOperation.EDIT:
            state = replace(state, edit_form=EditForm(), selected_appointment=None)
        else:
            state = replace(state, selected_appointment=None)
        return InteractionResult(replace(state, error=None))

    def _on_write_failed(self, state: InteractionState, event: WriteFailed) -> InteractionResult:
        op = event.operation
        message = _FAILURE_MESSAGES[op]
        if op in _DETAILED_FAILURES and event.detail:
            message = f"{message} {event.detail}"
        self._logger.warning("Store write failed", extra={"operation": op.value, "error": event.detail})

        if op in (WriteOperation.MOVE, WriteOperation.RESIZE):
            state = self._end_gesture(state)
        elif op is WriteOperation.DELETE and state.dialog is DialogKind.DELETE_CONFIRM:
            state = self._dialogs.close(state)
        # create/edit dialogs stay open so the user can retry
        return InteractionResult(replace(state, error=message))

    @staticmethod
    def _end_gesture(state: InteractionState) -> InteractionState:
        if state.mode in (Mode.DRAGGING, Mode.RESIZING):
            state = replace(state, mode=Mode.IDLE)
        return replace(state, dragging_appointment_id=None)

    def _on_appointments_refreshed(self, state: InteractionState, event: AppointmentsRefreshed) -> InteractionResult:
        # a successful fetch clears the banner
        state = replace(state, error=None)
        selected = state.selected_appointment
        if selected is None:
            return InteractionResult(state)
        fresh = next((e for e in event.events if e.id == selected.id), None)
        return InteractionResult(replace(state, selected_appointment=fresh))

    def _on_store_load_failed(self, state: InteractionState, event: StoreLoadFailed) -> InteractionResult:
        return InteractionResult(replace(state, error=event.message))

    def _on_error_dismissed(self, state: InteractionState, event: ErrorDismissed) -> InteractionResult:
        return InteractionResult(replace(state, error=None))
