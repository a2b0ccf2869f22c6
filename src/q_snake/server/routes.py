"""REST API route handlers for simulation control."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from q_snake.server.manager import SimulationManager
from q_snake.server.models import (
    ErrorResponse,
    SimulationSummary,
    StartRequest,
    StepRequest,
    StepResponse,
)

router = APIRouter(prefix="/simulation", tags=["simulation"])
_CONFLICT = {409: {"model": ErrorResponse}}


def _get_manager(request: Request) -> SimulationManager:
    return request.app.state.simulation


@router.get("")
async def get_simulation(request: Request) -> dict:
    """Loop status, training counters and the current snapshot."""
    manager = _get_manager(request)
    result = manager.summary().model_dump(mode="json")
    result["state"] = await manager.snapshot()
    return result


@router.post("/start", status_code=200, responses=_CONFLICT)
async def start_simulation(
    body: StartRequest, request: Request,
) -> SimulationSummary:
    """Start the background tick loop."""
    manager = _get_manager(request)
    try:
        manager.start(body.tick_rate_ms)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return manager.summary()


@router.post("/stop", status_code=200, responses=_CONFLICT)
async def stop_simulation(request: Request) -> SimulationSummary:
    """Stop the tick loop between ticks."""
    manager = _get_manager(request)
    try:
        await manager.stop()
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return manager.summary()


@router.post("/step", status_code=200, responses=_CONFLICT)
async def step_simulation(body: StepRequest, request: Request) -> StepResponse:
    """Advance a stopped simulation by a number of ticks."""
    manager = _get_manager(request)
    try:
        crashes, eaten, state = await manager.step(body.ticks)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return StepResponse(
        ticks=body.ticks, crashes=crashes, food_eaten=eaten, state=state,
    )


@router.post("/reset", status_code=200)
async def reset_simulation(request: Request) -> dict:
    """Start a fresh snake and food, keeping what was learned."""
    return await _get_manager(request).reset()
