from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from schedule_desk.domain.entities.calendar_event import CalendarEvent


class View(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class Mode(str, Enum):
    IDLE = "idle"
    SLOT_SELECTING = "slot_selecting"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    CONTEXT_MENU_OPEN = "context_menu_open"
    DIALOG_OPEN = "dialog_open"


class DialogKind(str, Enum):
    SCHEDULE_CREATE = "schedule_create"
    EDIT = "edit"
    DELETE_CONFIRM = "delete_confirm"


class MenuItem(str, Enum):
    SCHEDULE = "Schedule"
    EDIT = "Edit"
    DELETE = "Delete"


@dataclass(frozen=True)
class SlotRange:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class ContextMenu:
    x: float
    y: float
    items: tuple[MenuItem, ...]


@dataclass(frozen=True)
class CreateForm:
    # raw input values, as typed into the dialog
    client_id: str = ""
    appointment_time: str = ""  # YYYY-MM-DDTHH:MM
    duration: str = ""  # minutes
    description: str = ""


@dataclass(frozen=True)
class EditForm:
    client_id: str = ""
    appointment_time: str = ""
    end_time: str = ""
    description: str = ""


@dataclass(frozen=True)
class InteractionState:
    mode: Mode = Mode.IDLE
    dialog: DialogKind | None = None  # set only while mode is DIALOG_OPEN
    view: View = View.WEEK
    anchor_date: date | None = None  # date the calendar is centered on
    selected_appointment: CalendarEvent | None = None
    selected_slot_range: SlotRange | None = None
    highlighted_slots: tuple[datetime, ...] = ()
    highlighted_day: date | None = None
    dragging_appointment_id: int | None = None
    context_menu: ContextMenu | None = None
    create_form: CreateForm = CreateForm()
    edit_form: EditForm = EditForm()
    error: str | None = None
