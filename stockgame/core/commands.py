from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

TradeAction = Literal["buy", "sell"]

# "buy 300", "SELL50", "please buy   25 now"
_AMOUNT_RE = re.compile(r"(buy|sell)\s*(\d+)")


@dataclass(frozen=True, slots=True)
class TradeCommand:
    action: TradeAction
    amount: int


def parse_command(text: str, *, default_amount: int) -> TradeCommand | None:
    """Turn a chat line into a trade intent, or None if it is plain chat.

    The keyword check is a substring match, so "buy" wins over "sell" when both
    appear, and the amount comes from the first "<keyword> <digits>" pair.
    """

    lowered = text.lower()

    amount = default_amount
    match = _AMOUNT_RE.search(lowered)
    if match:
        amount = int(match.group(2))

    if "buy" in lowered:
        return TradeCommand(action="buy", amount=amount)
    if "sell" in lowered:
        return TradeCommand(action="sell", amount=amount)
    return None
