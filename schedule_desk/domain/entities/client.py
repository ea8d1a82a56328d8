from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Client:
    id: int
    name: str
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class ClientInput:
    name: str
    email: str = ""
    phone: str = ""
