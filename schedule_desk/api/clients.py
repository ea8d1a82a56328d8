from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from schedule_desk.api.schemas import ClientCreateSchema, ClientSchema
from schedule_desk.application.ports.schedule_repository import ScheduleRepositoryPort
from schedule_desk.domain.entities.client import ClientInput
from schedule_desk.wiring.dependencies import get_schedule_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/clients", response_model=list[ClientSchema])
def list_clients(repo: ScheduleRepositoryPort = Depends(get_schedule_repository)):
    return [ClientSchema(id=c.id, name=c.name, email=c.email, phone=c.phone) for c in repo.list_clients()]


@router.post("/clients", response_model=ClientSchema)
def create_client(
    req: ClientCreateSchema,
    repo: ScheduleRepositoryPort = Depends(get_schedule_repository),
):
    client = repo.create_client(ClientInput(name=req.name, email=req.email, phone=req.phone))
    logger.info("Client created", extra={"client_id": client.id})
    return ClientSchema(id=client.id, name=client.name, email=client.email, phone=client.phone)
