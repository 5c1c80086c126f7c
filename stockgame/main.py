from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import redis
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from stockgame.api.routes import router
from stockgame.infra.redis_client import create_redis
from stockgame.quotes import QuoteSource, YahooQuoteSource
from stockgame.runtime import GameRuntime
from stockgame.settings import GameSettings, load_dotenv_if_present, load_settings
from stockgame.streams import EventFeed, feed_key

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

_app_dir = Path(__file__).resolve().parent
_static_dir = _app_dir / "static"


def create_app(
    *,
    settings: GameSettings | None = None,
    quotes: QuoteSource | None = None,
    r: redis.Redis | None = None,
) -> FastAPI:
    if settings is None:
        load_dotenv_if_present()
        settings = load_settings()

    feed = None
    if settings.event_feed:
        feed = EventFeed(r=r if r is not None else create_redis(), key=feed_key(settings.stock_symbol))

    runtime = GameRuntime.create(
        settings=settings,
        quotes=quotes if quotes is not None else YahooQuoteSource(),
        feed=feed,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if settings.run_loop and runtime.loop is not None:
            runtime.loop.start()
        try:
            yield
        finally:
            if runtime.loop is not None:
                await runtime.loop.stop()

    app = FastAPI(title="stockgame", version="0.1.0", lifespan=lifespan)
    app.state.runtime = runtime
    app.include_router(router)

    # Serve the overlay UI (no build step).
    if _static_dir.exists():
        app.mount("/ui", StaticFiles(directory=str(_static_dir), html=True), name="ui")

    @app.get("/")
    async def _root() -> RedirectResponse:
        return RedirectResponse(url="/ui/")

    @app.get("/info")
    async def info() -> dict[str, str]:
        return {"name": "stockgame", "version": "0.1.0", "symbol": settings.stock_symbol}

    logger.info("overlay ready for %s (%s)", settings.stock_symbol, settings.stock_name)
    return app


app = create_app()
