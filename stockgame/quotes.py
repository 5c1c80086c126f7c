from __future__ import annotations

import asyncio
import logging
import math
from typing import Protocol

logger = logging.getLogger(__name__)

# yfinance and urllib3 are chatty at DEBUG; the update loop logs its own failures.
logging.getLogger("yfinance").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


class QuoteError(RuntimeError):
    """The quote source could not produce a usable price."""


class QuoteSource(Protocol):
    async def fetch_price(self, symbol: str) -> float:  # pragma: no cover
        ...


def _usable(price: object) -> float | None:
    if price is None:
        return None
    try:
        value = float(price)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class YahooQuoteSource:
    """Last traded price from Yahoo Finance via yfinance.

    yfinance is blocking, so each fetch runs in a worker thread.
    """

    def __init__(self) -> None:
        import yfinance as yf

        self._yf = yf
        self._tickers: dict[str, object] = {}

    def _ticker(self, symbol: str):  # type: ignore[no-untyped-def]
        ticker = self._tickers.get(symbol)
        if ticker is None:
            ticker = self._yf.Ticker(symbol)
            self._tickers[symbol] = ticker
        return ticker

    def _fetch_blocking(self, symbol: str) -> float:
        ticker = self._ticker(symbol)

        price = _usable(ticker.fast_info.last_price)
        if price is not None:
            return price

        # fast_info can come back empty outside market hours; fall back to the last bar.
        hist = ticker.history(period="1d", interval="1m")
        if hist.empty:
            hist = ticker.history(period="5d", interval="1d")
        if not hist.empty:
            price = _usable(hist["Close"].iloc[-1])
            if price is not None:
                return price

        raise QuoteError(f"No price data for {symbol}")

    async def fetch_price(self, symbol: str) -> float:
        try:
            return await asyncio.to_thread(self._fetch_blocking, symbol)
        except QuoteError:
            raise
        except Exception as e:
            # yfinance surfaces network and parsing problems as assorted exception types.
            raise QuoteError(f"Quote fetch for {symbol} failed: {e}") from e
