from __future__ import annotations

from pydantic import BaseModel, Field


class NetworkIn(BaseModel):
    address: str = Field(..., max_length=64)
    netmask: str = Field(..., max_length=64)


class NetworksOut(BaseModel):
    networks: list[str]


class ExistsOut(BaseModel):
    exists: bool


class MatchOut(BaseModel):
    address: str
    match: bool


class SeedOut(BaseModel):
    ok: str = "true"
    count: int
