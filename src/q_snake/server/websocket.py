"""WebSocket handler streaming simulation snapshots."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from q_snake.server.manager import SimulationManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SimulationManager:
    return ws.app.state.simulation


@ws_router.websocket("/simulation/stream")
async def stream(websocket: WebSocket) -> None:
    """Receive-only stream: one JSON snapshot per tick."""
    manager = _get_manager(websocket)
    await websocket.accept()
    manager.spectators.append(websocket)
    logger.info("Spectator connected (%d total).", len(manager.spectators))

    # Send an initial snapshot so the client can draw immediately.
    state = await manager.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Spectator disconnected.")
    finally:
        if websocket in manager.spectators:
            manager.spectators.remove(websocket)
