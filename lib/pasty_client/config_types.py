from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientConfig:
    host: str
    token: str | None = None
    client_version: str | None = None
