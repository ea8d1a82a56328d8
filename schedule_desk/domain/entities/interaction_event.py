"""Input events consumed by the interaction state machine.

Surface events come from the calendar (pointer and keyboard); dialog events
come from the modal forms; store events report the outcome of effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.effect import WriteOperation
from schedule_desk.domain.entities.interaction_state import MenuItem, View


@dataclass(frozen=True)
class SlotSelectionStarted:
    start: datetime


@dataclass(frozen=True)
class SlotClicked:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class SlotDoubleClicked:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class EventClicked:
    event: CalendarEvent


@dataclass(frozen=True)
class EventDoubleClicked:
    event: CalendarEvent


@dataclass(frozen=True)
class ContextMenuRequested:
    client_x: float
    client_y: float
    surface_left: float = 0.0
    surface_top: float = 0.0
    target: CalendarEvent | None = None  # appointment under the pointer, from the hit-test


@dataclass(frozen=True)
class ContextMenuDismissed:
    pass


@dataclass(frozen=True)
class MenuItemChosen:
    item: MenuItem


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class DragStarted:
    event: CalendarEvent


@dataclass(frozen=True)
class ResizeStarted:
    event: CalendarEvent


@dataclass(frozen=True)
class DragEnded:
    """Drag or resize released without a drop."""


@dataclass(frozen=True)
class EventDropped:
    event: CalendarEvent
    start: datetime
    end: datetime
    all_day: bool = False


@dataclass(frozen=True)
class EventResized:
    event: CalendarEvent
    start: datetime
    end: datetime
    all_day: bool = False


@dataclass(frozen=True)
class ViewChanged:
    view: View
    date: date


@dataclass(frozen=True)
class FormFieldChanged:
    field: str
    value: str


@dataclass(frozen=True)
class DialogCancelled:
    pass


@dataclass(frozen=True)
class CreateSubmitted:
    pass


@dataclass(frozen=True)
class EditSubmitted:
    pass


@dataclass(frozen=True)
class DeleteConfirmed:
    pass


@dataclass(frozen=True)
class WriteSucceeded:
    operation: WriteOperation


@dataclass(frozen=True)
class WriteFailed:
    operation: WriteOperation
    detail: str = ""


@dataclass(frozen=True)
class AppointmentsRefreshed:
    events: tuple[CalendarEvent, ...]


@dataclass(frozen=True)
class StoreLoadFailed:
    message: str


@dataclass(frozen=True)
class ErrorDismissed:
    pass


InteractionEvent = (
    SlotSelectionStarted
    | SlotClicked
    | SlotDoubleClicked
    | EventClicked
    | EventDoubleClicked
    | ContextMenuRequested
    | ContextMenuDismissed
    | MenuItemChosen
    | KeyPressed
    | DragStarted
    | ResizeStarted
    | DragEnded
    | EventDropped
    | EventResized
    | ViewChanged
    | FormFieldChanged
    | DialogCancelled
    | CreateSubmitted
    | EditSubmitted
    | DeleteConfirmed
    | WriteSucceeded
    | WriteFailed
    | AppointmentsRefreshed
    | StoreLoadFailed
    | ErrorDismissed
)
