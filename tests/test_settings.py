from __future__ import annotations

import pytest

from stockgame.settings import GameSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    import os

    for name in list(os.environ):
        if name.startswith("STOCKGAME_"):
            monkeypatch.delenv(name)


def test_defaults_match_game_rules() -> None:
    s = load_settings()

    assert s == GameSettings()
    assert s.initial_cash == 10_000
    assert s.tick_seconds == 1.0
    assert s.history_limit == 50
    assert s.milestone_step == 100
    assert s.reward_step == 5_000
    assert s.reward_debounce_seconds == 10
    assert (s.milestone_overlay_seconds, s.reward_overlay_seconds) == (3, 5)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOCKGAME_SYMBOL", "NVDA")
    monkeypatch.setenv("STOCKGAME_NAME", "NVIDIA")
    monkeypatch.setenv("STOCKGAME_INITIAL_CASH", "2500.5")
    monkeypatch.setenv("STOCKGAME_HISTORY_LIMIT", "10")
    monkeypatch.setenv("STOCKGAME_RUN_LOOP", "false")

    s = load_settings()

    assert (s.stock_symbol, s.stock_name) == ("NVDA", "NVIDIA")
    assert s.initial_cash == 2500.5
    assert s.history_limit == 10
    assert s.run_loop is False


def test_malformed_number_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOCKGAME_MILESTONE_STEP", "lots")

    with pytest.raises(ValueError, match="STOCKGAME_MILESTONE_STEP"):
        load_settings()


def test_non_positive_step_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOCKGAME_MILESTONE_STEP", "0")

    with pytest.raises(ValueError, match="must be positive"):
        load_settings()
