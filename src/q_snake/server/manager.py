"""Owns one simulation and drives it from an async tick loop."""

from __future__ import annotations

import asyncio
import json
import logging

from starlette.websockets import WebSocket, WebSocketState

from q_snake.ai.config import TrainingConfig
from q_snake.engine import EpisodeController
from q_snake.server.models import LoopStatus, SimulationSummary

logger = logging.getLogger(__name__)


class SimulationManager:
    """Serializes access to one :class:`EpisodeController`.

    The tick loop and every request handler take :attr:`lock` before
    touching the controller, so ticks never interleave. Stopping the loop
    is the quit signal: the task is cancelled between ticks.
    """

    def __init__(
        self,
        config: TrainingConfig | None = None,
        tick_rate_ms: int = 200,
    ) -> None:
        self.config = config or TrainingConfig()
        self.controller = EpisodeController(self.config)
        self.tick_rate_ms = tick_rate_ms
        self.spectators: list[WebSocket] = []
        self.lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    @property
    def status(self) -> LoopStatus:
        if self._task is not None and not self._task.done():
            return LoopStatus.RUNNING
        return LoopStatus.STOPPED

    def summary(self) -> SimulationSummary:
        ctl = self.controller
        return SimulationSummary(
            status=self.status,
            tick_rate_ms=self.tick_rate_ms,
            tick=ctl.total_ticks,
            episode=ctl.episode,
            exploration_rate=ctl.exploration_rate,
            training=ctl.agent.training,
            score=ctl.score,
        )

    def start(self, tick_rate_ms: int | None = None) -> None:
        """Start the background tick loop."""
        if self.status == LoopStatus.RUNNING:
            raise ValueError("Simulation is already running.")
        if tick_rate_ms is not None:
            self.tick_rate_ms = tick_rate_ms
        self._task = asyncio.create_task(self._tick_loop())
        logger.info("Simulation started at %d ms per tick.", self.tick_rate_ms)

    async def stop(self) -> None:
        """Cancel the tick loop and wait for it to finish."""
        task = self._task
        if task is None or task.done():
            raise ValueError("Simulation is not running.")
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        self._task = None
        logger.info(
            "Simulation stopped at tick %d.", self.controller.total_ticks,
        )

    async def step(self, ticks: int = 1) -> tuple[int, int, dict]:
        """Advance manually while the loop is stopped.

        Returns ``(crashes, food_eaten, snapshot)``.
        """
        if self.status == LoopStatus.RUNNING:
            raise ValueError("Stop the simulation before stepping manually.")
        crashes = 0
        eaten = 0
        async with self.lock:
            for _ in range(ticks):
                result = self.controller.tick()
                crashes += int(result.crashed)
                eaten += int(result.ate_food)
            state = self.controller.snapshot()
        await self._broadcast(state)
        return crashes, eaten, state

    async def reset(self) -> dict:
        """Reset the snake and food; the learned table is kept."""
        async with self.lock:
            self.controller.reset()
            state = self.controller.snapshot()
        await self._broadcast(state)
        logger.info("Simulation reset by request.")
        return state

    async def snapshot(self) -> dict:
        async with self.lock:
            return self.controller.snapshot()

    async def _tick_loop(self) -> None:
        """Tick the controller at the configured rate, broadcasting each frame."""
        try:
            while True:
                await asyncio.sleep(self.tick_rate_ms / 1000.0)
                async with self.lock:
                    self.controller.tick()
                    state = self.controller.snapshot()
                await self._broadcast(state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled.")
        except Exception:
            logger.exception("Tick loop error; stopping simulation.")

    async def _broadcast(self, state: dict) -> None:
        """Send the snapshot to all connected spectators."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []
        # Iterate over a copy so disconnect handlers can mutate the list.
        for ws in list(self.spectators):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            if ws in self.spectators:
                self.spectators.remove(ws)

    async def cleanup(self) -> None:
        """Cancel the tick loop and close spectator sockets."""
        if self.status == LoopStatus.RUNNING:
            await self.stop()
        for ws in list(self.spectators):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Server shutting down.")
            except Exception:
                logger.warning("Failed closing spectator socket.")
        self.spectators.clear()
        logger.info("SimulationManager cleanup complete.")
