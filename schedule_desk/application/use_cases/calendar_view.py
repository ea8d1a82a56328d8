"""Calendar view adapter.

Maps fetched appointments to display events, derives slot and event visual
state from the interaction state, and maps surface coordinates back to events.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from schedule_desk.application.utils.time_utils import same_minute, start_of_day, start_of_week
from schedule_desk.domain.entities.appointment import Appointment
from schedule_desk.domain.entities.calendar_event import CalendarEvent
from schedule_desk.domain.entities.interaction_state import InteractionState, Mode, View

MONTH_GRID_DAYS = 42


class SlotVisual(str, Enum):
    DAY_HIGHLIGHT = "day_highlight"
    DROP_TARGET = "drop_target"
    SELECTED = "selected"
    NONE = "none"


@dataclass(frozen=True)
class EventVisual:
    movable: bool
    resizable: bool
    selected: bool
    dragging: bool


@dataclass(frozen=True)
class SurfaceGeometry:
    width: float
    height: float
    header_height: float = 40.0
    month_row_height: float = 20.0  # one stacked event row inside a month cell
    slot_minutes: int = 30


@dataclass(frozen=True)
class EventBox:
    event: CalendarEvent
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def to_calendar_event(appointment: Appointment) -> CalendarEvent:
    return CalendarEvent(
        id=appointment.id,
        title=f"{appointment.client_name} - {appointment.description or 'No description'}",
        start=appointment.appointment_time,
        end=appointment.end_time,
        client_id=appointment.client_id,
        description=appointment.description,
    )


def to_calendar_events(appointments: list[Appointment]) -> list[CalendarEvent]:
    return [to_calendar_event(a) for a in appointments]


def slot_visual(state: InteractionState, slot: datetime) -> SlotVisual:
    """Visual state of one slot: day highlight, then drop target, then plain selection."""
    if state.highlighted_day is not None and slot.date() == state.highlighted_day:
        return SlotVisual.DAY_HIGHLIGHT
    in_selection = any(same_minute(slot, s) for s in state.highlighted_slots)
    if in_selection and state.mode in (Mode.DRAGGING, Mode.RESIZING):
        return SlotVisual.DROP_TARGET
    if in_selection:
        return SlotVisual.SELECTED
    return SlotVisual.NONE


def event_visual(state: InteractionState, event: CalendarEvent) -> EventVisual:
    selected = state.selected_appointment is not None and state.selected_appointment.id == event.id
    dragging = state.mode in (Mode.DRAGGING, Mode.RESIZING) and state.dragging_appointment_id == event.id
    return EventVisual(movable=True, resizable=True, selected=selected, dragging=dragging)


def visible_range(view: View, anchor: date) -> tuple[date, date]:
    """First visible date and the date after the last visible one."""
    if view is View.DAY:
        return anchor, anchor + timedelta(days=1)
    if view is View.WEEK:
        first = start_of_week(anchor)
        return first, first + timedelta(days=7)
    first = start_of_week(anchor.replace(day=1))
    return first, first + timedelta(days=MONTH_GRID_DAYS)


def navigate_date(view: View, requested: date, highlighted_day: date | None) -> date:
    """Date to center on after a view switch; a highlighted day wins over the requested date."""
    if highlighted_day is None:
        return requested
    if view is View.DAY:
        return highlighted_day
    if view is View.WEEK:
        return start_of_week(highlighted_day)
    return requested


def layout_events(
    events: list[CalendarEvent],
    view: View,
    anchor: date,
    geometry: SurfaceGeometry,
) -> list[EventBox]:
    if view is View.MONTH:
        return _layout_month(events, anchor, geometry)
    return _layout_time_grid(events, view, anchor, geometry)


def hit_test(boxes: list[EventBox], x: float, y: float) -> CalendarEvent | None:
    """Topmost event under the point (later boxes are drawn over earlier ones)."""
    for box in reversed(boxes):
        if box.contains(x, y):
            return box.event
    return None


def _event_end(event: CalendarEvent, slot_minutes: int) -> datetime:
    return event.end or event.start + timedelta(minutes=slot_minutes)


def _layout_time_grid(
    events: list[CalendarEvent],
    view: View,
    anchor: date,
    geometry: SurfaceGeometry,
) -> list[EventBox]:
    first, last = visible_range(view, anchor)
    days = [first + timedelta(days=i) for i in range((last - first).days)]
    column_width = geometry.width / len(days)
    per_minute = (geometry.height - geometry.header_height) / (24 * 60)
    min_height = geometry.slot_minutes * per_minute

    boxes: list[EventBox] = []
    for event in sorted(events, key=lambda e: (e.start, e.id)):
        end = _event_end(event, geometry.slot_minutes)
        for column, day in enumerate(days):
            day_start = start_of_day(day)
            day_end = day_start + timedelta(days=1)
            segment_start = max(event.start, day_start)
            segment_end = min(end, day_end)
            if segment_start > segment_end or segment_start >= day_end:
                continue
            if segment_start == segment_end and not (day_start <= event.start < day_end):
                continue
            offset = (segment_start - day_start).total_seconds() / 60
            length = (segment_end - segment_start).total_seconds() / 60
            boxes.append(
                EventBox(
                    event=event,
                    x=column * column_width,
                    y=geometry.header_height + offset * per_minute,
                    width=column_width,
                    height=max(length * per_minute, min_height),
                )
            )
    return boxes


def _layout_month(events: list[CalendarEvent], anchor: date, geometry: SurfaceGeometry) -> list[EventBox]:
    first, last = visible_range(View.MONTH, anchor)
    cell_width = geometry.width / 7
    cell_height = (geometry.height - geometry.header_height) / (MONTH_GRID_DAYS // 7)
    rows_per_cell = int(cell_height // geometry.month_row_height) - 1  # first row holds the date label

    stacked: dict[date, int] = {}
    boxes: list[EventBox] = []
    for event in sorted(events, key=lambda e: (e.start, e.id)):
        end = _event_end(event, geometry.slot_minutes)
        last_day = end.date()
        if end > event.start and end == start_of_day(end):
            last_day -= timedelta(days=1)
        day = max(event.start.date(), first)
        while day <= last_day and day < last:
            row = stacked.get(day, 0)
            stacked[day] = row + 1
            if row < rows_per_cell:
                index = (day - first).days
                boxes.append(
                    EventBox(
                        event=event,
                        x=(index % 7) * cell_width,
                        y=geometry.header_height
                        + (index // 7) * cell_height
                        + (row + 1) * geometry.month_row_height,
                        width=cell_width,
                        height=geometry.month_row_height,
                    )
                )
            day += timedelta(days=1)
    return boxes
