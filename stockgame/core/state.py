from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from stockgame.settings import GameSettings


@dataclass(frozen=True, slots=True)
class PricePoint:
    # Epoch milliseconds, which is what the chart client expects.
    time: int
    price: float


@dataclass(slots=True)
class GameState:
    """The single mutable portfolio record the game revolves around.

    Derived fields (`total_assets`, `avg_share_cost`, `pl_*`) are only refreshed by
    `revalue()`; trades and gifts leave them stale until the next update cycle.
    """

    stock_symbol: str
    stock_name: str
    cash: float
    reward_threshold: float
    last_milestone: float
    history_limit: int = 50

    shares: float = 0.0
    stock_price: float = 0.0
    position_cost: float = 0.0

    avg_share_cost: float = 0.0
    total_assets: float = 0.0
    pl_amount: float = 0.0
    pl_percent: float = 0.0

    # Rebuilt with maxlen=history_limit in __post_init__, so appends evict the oldest sample.
    history: deque[PricePoint] = field(default_factory=deque)

    reward_triggered: bool = False
    # Monotonic deadline after which `reward_triggered` clears.
    reward_rearm_at: float | None = None

    def __post_init__(self) -> None:
        self.history = deque(self.history, maxlen=self.history_limit)

    @classmethod
    def from_settings(cls, settings: GameSettings) -> "GameState":
        step = settings.milestone_step
        state = cls(
            stock_symbol=settings.stock_symbol,
            stock_name=settings.stock_name,
            cash=settings.initial_cash,
            reward_threshold=settings.reward_threshold,
            last_milestone=float(math.floor(settings.initial_cash / step) * step),
            history_limit=settings.history_limit,
        )
        state.revalue()
        return state

    def revalue(self) -> None:
        self.total_assets = round(self.cash + self.shares * self.stock_price, 2)

        if self.shares <= 0:
            self.shares = 0.0
            self.position_cost = 0.0
            self.avg_share_cost = 0.0
            self.pl_amount = 0.0
            self.pl_percent = 0.0
            return

        self.avg_share_cost = round(self.position_cost / self.shares, 2)
        pl_amount = self.shares * self.stock_price - self.position_cost
        self.pl_amount = round(pl_amount, 2)
        self.pl_percent = round(pl_amount / self.position_cost * 100, 2) if self.position_cost > 0 else 0.0

    def record_price(self, *, time_ms: int) -> None:
        self.history.append(PricePoint(time=time_ms, price=self.stock_price))

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the state, keyed the way the overlay client reads it."""

        return {
            "cash": self.cash,
            "shares": self.shares,
            "stockPrice": self.stock_price,
            "stockName": self.stock_name,
            "stockSymbol": self.stock_symbol,
            "totalAssets": self.total_assets,
            "history": [{"time": p.time, "price": p.price} for p in self.history],
            "rewardThreshold": self.reward_threshold,
            "lastMilestone": self.last_milestone,
            "rewardTriggered": self.reward_triggered,
            "positionCost": self.position_cost,
            "avgShareCost": self.avg_share_cost,
            "plAmount": self.pl_amount,
            "plPercent": self.pl_percent,
        }
