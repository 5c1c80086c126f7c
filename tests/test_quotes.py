from __future__ import annotations

from types import SimpleNamespace

import pytest

from stockgame.quotes import QuoteError, YahooQuoteSource


class _Frame:
    """Just enough of a pandas frame for the history fallback."""

    def __init__(self, closes: list[float]) -> None:
        self.empty = not closes
        self._closes = closes

    def __getitem__(self, column: str):  # type: ignore[no-untyped-def]
        assert column == "Close"
        return SimpleNamespace(iloc=self._closes)


class _Ticker:
    def __init__(self, last_price: object, closes: list[float] | None = None, error: Exception | None = None) -> None:
        self.fast_info = SimpleNamespace(last_price=last_price)
        self.closes = closes or []
        self.error = error
        self.history_calls: list[tuple[str, str]] = []

    def history(self, *, period: str, interval: str) -> _Frame:
        if self.error is not None:
            raise self.error
        self.history_calls.append((period, interval))
        return _Frame(self.closes)


def _source_with(ticker: _Ticker) -> YahooQuoteSource:
    source = YahooQuoteSource()
    source._tickers["TEST"] = ticker
    return source


@pytest.mark.asyncio
async def test_fast_info_price_is_used() -> None:
    ticker = _Ticker(last_price=187.23)
    assert await _source_with(ticker).fetch_price("TEST") == 187.23
    assert ticker.history_calls == []


@pytest.mark.asyncio
async def test_falls_back_to_last_bar_when_fast_info_is_empty() -> None:
    ticker = _Ticker(last_price=float("nan"), closes=[10.0, 11.5])
    assert await _source_with(ticker).fetch_price("TEST") == 11.5
    assert ticker.history_calls == [("1d", "1m")]


@pytest.mark.asyncio
async def test_no_data_is_a_quote_error() -> None:
    with pytest.raises(QuoteError, match="No price data"):
        await _source_with(_Ticker(last_price=None)).fetch_price("TEST")


@pytest.mark.asyncio
async def test_library_errors_are_wrapped() -> None:
    ticker = _Ticker(last_price=0, error=ConnectionError("offline"))
    with pytest.raises(QuoteError, match="offline"):
        await _source_with(ticker).fetch_price("TEST")


@pytest.mark.asyncio
async def test_infinite_fast_info_price_is_ignored() -> None:
    ticker = _Ticker(last_price=float("inf"), closes=[42.0])
    assert await _source_with(ticker).fetch_price("TEST") == 42.0
