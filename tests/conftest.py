from __future__ import annotations

from collections.abc import Generator

import pytest

from stockgame.core.state import GameState
from stockgame.settings import GameSettings


class FakeQuoteSource:
    """Scripted quote source: returns queued prices, raising any queued exceptions."""

    def __init__(self, *prices: float | Exception | None) -> None:
        self.prices: list[float | Exception | None] = list(prices)
        self.calls: list[str] = []
        self.last: float | Exception | None = None

    def push(self, *prices: float | Exception | None) -> None:
        self.prices.extend(prices)

    async def fetch_price(self, symbol: str) -> float:
        self.calls.append(symbol)
        value = self.prices.pop(0) if self.prices else self.last
        self.last = value
        if isinstance(value, Exception):
            raise value
        return value  # type: ignore[return-value]


@pytest.fixture()
def settings() -> GameSettings:
    # No background loop in tests; cycles are driven explicitly.
    return GameSettings(stock_symbol="TEST", stock_name="TEST CORP", run_loop=False)


@pytest.fixture()
def state(settings: GameSettings) -> GameState:
    return GameState.from_settings(settings)


@pytest.fixture()
def make_quotes() -> type[FakeQuoteSource]:
    return FakeQuoteSource


@pytest.fixture()
def quotes() -> FakeQuoteSource:
    return FakeQuoteSource(100.0)


@pytest.fixture()
def client_and_redis(settings: GameSettings, quotes: FakeQuoteSource):
    """FastAPI TestClient over a fresh app wired to fakeredis and a scripted quote source."""

    import fakeredis
    from fastapi.testclient import TestClient

    from stockgame.main import create_app

    r = fakeredis.FakeRedis(decode_responses=True)
    app = create_app(settings=settings, quotes=quotes, r=r)
    with TestClient(app) as c:
        yield c, r


@pytest.fixture()
def client(client_and_redis) -> Generator:  # type: ignore[no-untyped-def]
    c, _ = client_and_redis
    yield c
