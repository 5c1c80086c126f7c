from __future__ import annotations

from stockgame.core.state import GameState

# Share quantities are rounded to this many places after every trade to bound float drift.
SHARE_PRECISION = 6


def buy(state: GameState, amount: float) -> bool:
    """Spend `amount` dollars of cash on shares at the current price.

    Returns False (state untouched) when there is no price yet or cash is short.
    """

    if state.stock_price <= 0 or amount <= 0:
        return False
    if state.cash < amount:
        return False

    shares_to_buy = amount / state.stock_price
    state.cash -= amount
    state.shares = round(state.shares + shares_to_buy, SHARE_PRECISION)
    state.position_cost = round(state.position_cost + shares_to_buy * state.stock_price, 2)
    return True


def sell(state: GameState, amount: float) -> bool:
    """Sell `amount` dollars worth of shares at the current price.

    Cost basis shrinks by the average cost of the shares sold. Returns False
    (state untouched) when there is no price yet or the position is too small.
    """

    if state.stock_price <= 0 or amount <= 0:
        return False

    shares_to_sell = amount / state.stock_price
    if state.shares < shares_to_sell:
        return False

    avg_cost_per_share = state.position_cost / state.shares if state.shares > 0 else 0.0
    state.shares = round(state.shares - shares_to_sell, SHARE_PRECISION)
    state.cash += amount
    state.position_cost = round(max(0.0, state.position_cost - avg_cost_per_share * shares_to_sell), 2)

    if state.shares <= 0:
        state.shares = 0.0
        state.position_cost = 0.0
    return True
