"""Pydantic response models for the status surface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    ok: bool = True
    connected: bool


class SessionInfoResponse(BaseModel):
    ok: bool = True
    info: dict[str, Any] | None = None


class StatusResponse(BaseModel):
    connected: bool
    batch_size: int = Field(..., ge=0)
    ledger_size: int = Field(..., ge=0)
    flush_state: str
    threshold: int = Field(..., ge=1)
    last_flush: str | None = None
    version: str


class FlushResponse(BaseModel):
    ok: bool
    status: str
    count: int = 0
    message: str = ""


class InitResponse(BaseModel):
    ok: bool
    error: str | None = None
