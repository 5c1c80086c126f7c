from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from stockgame.core.commands import TradeAction, parse_command
from stockgame.core.events import GameEvent
from stockgame.core.state import GameState
from stockgame.core.trading import buy, sell

logger = logging.getLogger(__name__)

# Largest single gift credited. Bounds how far one request can move assets in a cycle.
MAX_GIFT_VALUE = 1_000_000.0


@dataclass(frozen=True, slots=True)
class MessageOutcome:
    """Result of handling one chat line.

    - `action`/`amount`: set only when a trade went through.
    - `events`: outbox to broadcast (trade or chat; empty for rejected input).
    """

    success: bool
    action: TradeAction | None = None
    amount: int | None = None
    message: str | None = None
    events: list[GameEvent] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class GiftOutcome:
    cash_added: float
    events: list[GameEvent]


def handle_message(*, state: GameState, user: str, text: str | None, default_amount: int) -> MessageOutcome:
    if not text:
        return MessageOutcome(success=False, message="No text provided")

    command = parse_command(text, default_amount=default_amount)

    traded = False
    if command is not None:
        trade = buy if command.action == "buy" else sell
        traded = trade(state, command.amount)
        if not traded:
            logger.info("%s %s $%d rejected for %s", command.action, state.stock_symbol, command.amount, user)

    if command is not None and traded:
        logger.info("%s %s $%d @ %.2f by %s", command.action, state.stock_symbol, command.amount, state.stock_price, user)
        event = GameEvent.now(
            type="trade_event",
            payload={"user": user, "action": command.action, "price": state.stock_price, "amount": command.amount},
        )
        return MessageOutcome(success=True, action=command.action, amount=command.amount, events=[event])

    # Plain chat, and trades the portfolio couldn't cover, are relayed as chat.
    event = GameEvent.now(type="chat_event", payload={"user": user, "text": text})
    return MessageOutcome(success=True, message="Message sent", events=[event])


def handle_gift(*, state: GameState, user: str, gift_value: float, gift_name: str) -> GiftOutcome:
    """Credit a gift to cash at 1 gift unit = $1.

    Raises ValueError for non-finite, negative or oversized values; cash is untouched.
    """

    cash_added = float(gift_value)
    if not math.isfinite(cash_added) or cash_added < 0:
        raise ValueError(f"Gift value must be a finite non-negative number, got {gift_value!r}")
    if cash_added > MAX_GIFT_VALUE:
        raise ValueError(f"Gift value {cash_added:,.2f} exceeds the {MAX_GIFT_VALUE:,.0f} cap")

    state.cash += cash_added
    logger.info("gift %s from %s: +$%.2f cash", gift_name, user, cash_added)

    event = GameEvent.now(type="gift_event", payload={"user": user, "giftName": gift_name, "cashAdded": cash_added})
    return GiftOutcome(cash_added=cash_added, events=[event])
