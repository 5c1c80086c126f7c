from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from stockgame.core.events import GameEvent
from stockgame.core.state import GameState
from stockgame.game_loop import GameLoop
from stockgame.quotes import QuoteSource
from stockgame.settings import GameSettings
from stockgame.streams import EventFeed
from stockgame.websocket_hub import OverlayWebSocketHub

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameRuntime:
    """Everything one running overlay owns: the state record and its collaborators.

    Attached to `app.state.runtime`; route handlers get it through `get_runtime`.
    """

    settings: GameSettings
    state: GameState
    quotes: QuoteSource
    hub: OverlayWebSocketHub
    feed: EventFeed | None = None
    loop: GameLoop | None = None

    @classmethod
    def create(
        cls,
        *,
        settings: GameSettings,
        quotes: QuoteSource,
        feed: EventFeed | None = None,
    ) -> "GameRuntime":
        runtime = cls(
            settings=settings,
            state=GameState.from_settings(settings),
            quotes=quotes,
            hub=OverlayWebSocketHub(),
            feed=feed,
        )
        runtime.loop = GameLoop(
            state=runtime.state,
            quotes=quotes,
            settings=settings,
            publish=runtime.publish,
        )
        return runtime

    async def publish(self, events: list[GameEvent]) -> None:
        if self.feed is not None:
            # redis-py is blocking; keep a slow or unreachable Redis off the event loop.
            await asyncio.to_thread(self.feed.append_many, events)
        for event in events:
            await self.hub.broadcast(event.to_message())
