from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from schedule_desk.infrastructure.store.memory_store import MemoryScheduleRepository
from schedule_desk.main import app
from schedule_desk.wiring.dependencies import get_schedule_repository


@pytest.fixture
def repository() -> MemoryScheduleRepository:
    return MemoryScheduleRepository()


@pytest.fixture
def http(repository):
    """TestClient bound to a fresh in-memory repository."""
    app.dependency_overrides[get_schedule_repository] = lambda: repository
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
