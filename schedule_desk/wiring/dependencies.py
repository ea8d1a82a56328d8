import logging

from schedule_desk.application.ports.appointment_store import AppointmentStorePort
from schedule_desk.application.ports.schedule_repository import ScheduleRepositoryPort
from schedule_desk.application.use_cases.calendar_session import CalendarSession
from schedule_desk.application.use_cases.dialogs import DialogCoordinator
from schedule_desk.application.use_cases.interaction import InteractionUseCase
from schedule_desk.core.config import settings
from schedule_desk.domain.entities.interaction_state import View
from schedule_desk.infrastructure.schedule_api.schedule_api_client import ScheduleApiClient
from schedule_desk.infrastructure.store.json_store import JsonScheduleRepository
from schedule_desk.infrastructure.store.memory_store import MemoryScheduleRepository


_schedule_repository: ScheduleRepositoryPort | None = None


def get_schedule_repository() -> ScheduleRepositoryPort:
    global _schedule_repository
    if _schedule_repository is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _schedule_repository = JsonScheduleRepository(data_dir=settings.DATA_DIR)
        else:
            _schedule_repository = MemoryScheduleRepository()
        logging.getLogger(__name__).info("Using %s", type(_schedule_repository).__name__)
    return _schedule_repository


def get_store_client() -> AppointmentStorePort:
    return ScheduleApiClient()


def get_dialog_coordinator() -> DialogCoordinator:
    return DialogCoordinator(enforce_end_after_start=settings.ENFORCE_END_AFTER_START)


def get_interaction_use_case() -> InteractionUseCase:
    return InteractionUseCase(
        dialogs=get_dialog_coordinator(),
        slot_minutes=settings.SLOT_MINUTES,
        menu_offset_y=settings.CONTEXT_MENU_OFFSET_Y,
    )


def get_calendar_session(store: AppointmentStorePort | None = None) -> CalendarSession:
    try:
        initial_view = View(settings.DEFAULT_VIEW.lower())
    except ValueError:
        logging.getLogger(__name__).warning("Unknown DEFAULT_VIEW=%s, using week", settings.DEFAULT_VIEW)
        initial_view = View.WEEK
    return CalendarSession(
        store=store or get_store_client(),
        interaction=get_interaction_use_case(),
        initial_view=initial_view,
    )
