from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from schedule_desk.application.exceptions import StoreError
from schedule_desk.application.ports.appointment_store import AppointmentStorePort
from schedule_desk.application.use_cases.calendar_view import (
    EventBox,
    EventVisual,
    SlotVisual,
    SurfaceGeometry,
    event_visual,
    hit_test,
    layout_events,
    slot_visual,
    to_calendar_events,
)
from schedule_desk.application.use_cases.interaction import InteractionUseCase
from schedule_desk.domain.entities.appointment import Appointment
from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.client import Client, ClientInput
from schedule_desk.domain.entities.effect import (
    CreateAppointment,
    DeleteAppointment,
    Effect,
    UpdateAppointment,
)
from schedule_desk.domain.entities.interaction_event import (
    AppointmentsRefreshed,
    ContextMenuRequested,
    InteractionEvent,
    StoreLoadFailed,
    WriteFailed,
    WriteSucceeded,
)
from schedule_desk.domain.entities.interaction_state import InteractionState, View


class CalendarSession:
    """Runs the interaction state machine against the appointment store.

    Holds the only copy of the interaction state and the last fetched
    appointment list. Every successful write is followed by a full re-fetch
    whose result replaces the list; nothing is patched locally.
    """

    def __init__(
        self,
        store: AppointmentStorePort,
        interaction: InteractionUseCase,
        geometry: SurfaceGeometry | None = None,
        initial_view: View = View.WEEK,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._interaction = interaction
        self._geometry = geometry or SurfaceGeometry(width=700.0, height=600.0)
        self._state = InteractionState(view=initial_view, anchor_date=clock().date())
        self._appointments: list[Appointment] = []
        self._events: list[CalendarEvent] = []
        self._clients: list[Client] = []
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def appointments(self) -> list[Appointment]:
        return list(self._appointments)

    @property
    def events(self) -> list[CalendarEvent]:
        return list(self._events)

    @property
    def clients(self) -> list[Client]:
        return list(self._clients)

    def load(self) -> None:
        self.refresh_clients()
        self.refresh()

    def refresh_clients(self) -> None:
        try:
            self._clients = self._store.list_clients()
        except StoreError as e:
            self._logger.error("Error fetching clients", extra={"error": e.message})
            self.dispatch(StoreLoadFailed("Failed to load clients."))

    def refresh(self) -> None:
        error = self._refetch()
        if error:
            self.dispatch(StoreLoadFailed(error))

    def create_client(self, data: ClientInput) -> Client:
        client = self._store.create_client(data)
        self.refresh_clients()
        return client

    def dispatch(self, event: InteractionEvent) -> InteractionState:
        result = self._interaction.process(self._state, event)
        if result.updated_state.mode != self._state.mode:
            self._logger.debug(
                "Interaction mode changed",
                extra={"mode": result.updated_state.mode.value, "operation": type(event).__name__},
            )
        self._state = result.updated_state
        for effect in result.effects:
            self._run(effect)
        return self._state

    # -- raw surface input ------------------------------------------------

    def layout(self) -> list[EventBox]:
        anchor = self._state.anchor_date
        if anchor is None:
            return []
        return layout_events(self._events, self._state.view, anchor, self._geometry)

    def right_click(
        self,
        client_x: float,
        client_y: float,
        surface_left: float = 0.0,
        surface_top: float = 0.0,
    ) -> InteractionState:
        target = hit_test(self.layout(), client_x - surface_left, client_y - surface_top)
        return self.dispatch(
            ContextMenuRequested(
                client_x=client_x,
                client_y=client_y,
                surface_left=surface_left,
                surface_top=surface_top,
                target=target,
            )
        )

    def resize_surface(self, geometry: SurfaceGeometry) -> None:
        self._geometry = geometry

    def slot_visual(self, slot: datetime) -> SlotVisual:
        return slot_visual(self._state, slot)

    def event_visual(self, event: CalendarEvent) -> EventVisual:
        return event_visual(self._state, event)

    # -- effects ----------------------------------------------------------

    def _run(self, effect: Effect) -> None:
        try:
            self._execute(effect)
        except StoreError as e:
            self.dispatch(WriteFailed(effect.operation, e.message))
            return
        error = self._refetch()
        self.dispatch(WriteSucceeded(effect.operation))
        if error:
            self.dispatch(StoreLoadFailed(error))

    def _execute(self, effect: Effect) -> None:
        if isinstance(effect, CreateAppointment):
            self._store.create_appointment(effect.payload)
        elif isinstance(effect, UpdateAppointment):
            self._store.update_appointment(effect.appointment_id, effect.payload)
        elif isinstance(effect, DeleteAppointment):
            self._store.delete_appointment(effect.appointment_id)
        else:
            raise TypeError(f"Unsupported effect: {type(effect).__name__}")
        self._logger.info("Store write completed", extra={"operation": effect.operation.value})

    def _refetch(self) -> str | None:
        """Replace the appointment list with the store's. Returns an error message on failure."""
        try:
            appointments = self._store.list_appointments()
        except StoreError as e:
            self._logger.error("Error fetching schedules", extra={"error": e.message})
            return "Failed to load schedules."
        self._appointments = appointments
        self._events = to_calendar_events(appointments)
        self.dispatch(AppointmentsRefreshed(tuple(self._events)))
        return None
