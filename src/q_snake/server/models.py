"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class LoopStatus(str, enum.Enum):
    """Whether the background tick loop is driving the simulation."""

    STOPPED = "stopped"
    RUNNING = "running"


class StartRequest(BaseModel):
    """Request body for POST /simulation/start."""

    tick_rate_ms: int = Field(default=200, ge=1, le=2000)


class StepRequest(BaseModel):
    """Request body for POST /simulation/step."""

    ticks: int = Field(default=1, ge=1, le=10_000)


class SimulationSummary(BaseModel):
    """Loop status plus the training counters."""

    status: LoopStatus
    tick_rate_ms: int
    tick: int
    episode: int
    exploration_rate: float
    training: bool
    score: int


class StepResponse(BaseModel):
    """Outcome of a manual step request."""

    ticks: int
    crashes: int
    food_eaten: int
    state: dict


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
