from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "state_update",
    "chat_event",
    "trade_event",
    "gift_event",
    "milestone_event",
    "reward_trigger",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: EventType
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, payload: dict[str, Any]) -> "GameEvent":
        return GameEvent(type=type, payload=payload, ts=datetime.now(timezone.utc))

    def to_message(self) -> dict[str, Any]:
        """Wire shape pushed to WebSocket viewers."""

        return {"event": self.type, "data": self.payload}
