from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stockgame.actions import MAX_GIFT_VALUE


class _CamelModel(BaseModel):
    # The overlay client and chat/gift bridges speak camelCase JSON.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageRequest(_CamelModel):
    # Optional so a missing text gets the game's own failure response instead of a 422.
    text: str | None = None
    user: str = "anonymous"


class MessageResponse(BaseModel):
    success: bool
    action: Literal["buy", "sell"] | None = None
    amount: int | None = None
    message: str | None = None


class GiftRequest(_CamelModel):
    gift_value: float = Field(..., ge=0, le=MAX_GIFT_VALUE, allow_inf_nan=False)
    user: str = "anonymous"
    gift_name: str = "gift"


class GiftResponse(_CamelModel):
    success: bool
    cash_added: float


class HistoryPoint(BaseModel):
    time: int
    price: float


class StateSnapshot(_CamelModel):
    cash: float
    shares: float
    stock_price: float
    stock_name: str
    stock_symbol: str
    total_assets: float
    history: list[HistoryPoint] = Field(default_factory=list)
    reward_threshold: float
    last_milestone: float
    reward_triggered: bool
    position_cost: float
    avg_share_cost: float
    pl_amount: float
    pl_percent: float


class OverlayConfig(_CamelModel):
    stock_symbol: str
    stock_name: str
    milestone_overlay_ms: int
    reward_overlay_ms: int


class FeedEntryModel(BaseModel):
    id: str
    event: str
    data: dict[str, Any]
    ts: str


class FeedResponse(BaseModel):
    entries: list[FeedEntryModel]
