from __future__ import annotations

from stockgame.core.state import GameState
from stockgame.settings import GameSettings


def test_initial_state_from_settings(settings: GameSettings) -> None:
    state = GameState.from_settings(settings)

    assert state.cash == 10_000
    assert state.total_assets == 10_000
    assert state.stock_price == 0
    assert state.last_milestone == 10_000
    assert state.reward_threshold == 15_000
    assert state.reward_triggered is False
    assert len(state.history) == 0


def test_last_milestone_starts_at_step_floor_of_initial_cash() -> None:
    state = GameState.from_settings(GameSettings(initial_cash=10_250, milestone_step=100))
    assert state.last_milestone == 10_200


def test_revalue_profit_and_loss(state: GameState) -> None:
    state.shares = 1
    state.position_cost = 100
    state.stock_price = 150

    state.revalue()

    assert state.pl_amount == 50
    assert state.pl_percent == 50.00
    assert state.avg_share_cost == 100
    assert state.total_assets == 10_150


def test_revalue_loss_is_negative(state: GameState) -> None:
    state.shares = 2
    state.position_cost = 200
    state.stock_price = 75

    state.revalue()

    assert state.pl_amount == -50
    assert state.pl_percent == -25.0


def test_revalue_flat_position_zeroes_metrics(state: GameState) -> None:
    state.shares = 0
    state.position_cost = 42
    state.avg_share_cost = 4.2
    state.pl_amount = 3
    state.pl_percent = 7

    state.revalue()

    assert (state.position_cost, state.avg_share_cost, state.pl_amount, state.pl_percent) == (0, 0, 0, 0)


def test_revalue_zero_cost_basis_reports_zero_percent(state: GameState) -> None:
    state.shares = 1
    state.position_cost = 0
    state.stock_price = 10

    state.revalue()

    assert state.pl_amount == 10
    assert state.pl_percent == 0


def test_history_is_bounded_and_fifo(state: GameState) -> None:
    for i in range(60):
        state.stock_price = float(i)
        state.record_price(time_ms=i)

    assert len(state.history) == 50
    assert state.history[0].time == 10
    assert state.history[-1].price == 59.0
    assert state.history.maxlen == 50


def test_snapshot_uses_client_keys(state: GameState) -> None:
    state.stock_price = 12.5
    state.record_price(time_ms=1_700_000_000_000)

    snap = state.snapshot()

    assert snap["stockPrice"] == 12.5
    assert snap["stockName"] == "TEST CORP"
    assert snap["history"] == [{"time": 1_700_000_000_000, "price": 12.5}]
    assert set(snap) >= {
        "cash",
        "shares",
        "totalAssets",
        "rewardThreshold",
        "lastMilestone",
        "rewardTriggered",
        "positionCost",
        "avgShareCost",
        "plAmount",
        "plPercent",
    }
