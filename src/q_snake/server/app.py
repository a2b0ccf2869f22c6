"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from q_snake.ai.config import TrainingConfig
from q_snake.server.manager import SimulationManager
from q_snake.server.routes import router
from q_snake.server.websocket import ws_router


def create_app(config: TrainingConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.simulation = SimulationManager(config)
        yield
        await app.state.simulation.cleanup()

    app = FastAPI(title="Q-Snake API", version="0.1.0", lifespan=_lifespan)
    app.include_router(router)
    app.include_router(ws_router)
    return app
