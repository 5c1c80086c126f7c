from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable

from stockgame.core.events import GameEvent
from stockgame.core.rewards import detect_milestones, detect_reward
from stockgame.core.state import GameState
from stockgame.quotes import QuoteSource
from stockgame.settings import GameSettings

logger = logging.getLogger(__name__)

Publisher = Callable[[list[GameEvent]], Awaitable[None]]


async def refresh_price(*, state: GameState, quotes: QuoteSource, price_floor: float) -> None:
    """Pull a fresh quote into `state.stock_price`; failures keep the last known price."""

    try:
        price = await quotes.fetch_price(state.stock_symbol)
    except Exception as e:
        logger.warning("Error fetching price for %s: %s", state.stock_symbol, e)
        price = None

    if price is not None and math.isfinite(price) and price > 0:
        state.stock_price = price

    if state.stock_price > 0:
        state.stock_price = max(price_floor, round(state.stock_price, 2))


async def run_tick(
    *,
    state: GameState,
    quotes: QuoteSource,
    settings: GameSettings,
    now_ms: int | None = None,
    monotonic: float | None = None,
) -> list[GameEvent]:
    """One update cycle: reprice, revalue, record history, celebrate, snapshot.

    Returns the events to broadcast in order; the `state_update` snapshot is always last.
    """

    await refresh_price(state=state, quotes=quotes, price_floor=settings.price_floor)

    state.revalue()
    state.record_price(time_ms=now_ms if now_ms is not None else int(time.time() * 1000))

    events: list[GameEvent] = []
    events.extend(detect_milestones(state, step=settings.milestone_step))
    events.extend(
        detect_reward(
            state,
            step=settings.reward_step,
            debounce_seconds=settings.reward_debounce_seconds,
            now=monotonic if monotonic is not None else time.monotonic(),
        )
    )
    events.append(GameEvent.now(type="state_update", payload=state.snapshot()))
    return events


class GameLoop:
    """Self-rescheduling update loop.

    Each cycle runs to completion, is published, and only then is the next one
    scheduled `tick_seconds` later, so a slow quote fetch delays the loop rather
    than overlapping it.
    """

    def __init__(
        self,
        *,
        state: GameState,
        quotes: QuoteSource,
        settings: GameSettings,
        publish: Publisher,
    ) -> None:
        self.state = state
        self.quotes = quotes
        self.settings = settings
        self.publish = publish
        self.cycles = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="stockgame-update-loop")
        logger.info("update loop started for %s every %.2fs", self.state.stock_symbol, self.settings.tick_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("update loop stopped after %d cycles", self.cycles)

    async def step(self) -> list[GameEvent]:
        events = await run_tick(state=self.state, quotes=self.quotes, settings=self.settings)
        await self.publish(events)
        self.cycles += 1
        return events

    async def _run(self) -> None:
        while True:
            try:
                await self.step()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("update cycle failed; retrying next tick")
            await asyncio.sleep(self.settings.tick_seconds)
