from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "STOCKGAME_"


@dataclass(frozen=True, slots=True)
class GameSettings:
    stock_symbol: str = "TSLA"
    stock_name: str = "TESLA"
    initial_cash: float = 10_000.0

    # Seconds between the end of one update cycle and the start of the next.
    tick_seconds: float = 1.0
    history_limit: int = 50

    milestone_step: int = 100
    reward_threshold: float = 15_000.0
    reward_step: float = 5_000.0
    reward_debounce_seconds: float = 10.0

    # Client-side overlay timings, served to the UI via /api/config.
    milestone_overlay_seconds: float = 3.0
    reward_overlay_seconds: float = 5.0

    default_trade_amount: int = 100
    price_floor: float = 0.1

    run_loop: bool = True
    event_feed: bool = True


def _env(name: str) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.casefold() in {"1", "true", "yes", "on"}


def load_dotenv_if_present(*, project_root: Path | None = None) -> None:
    """Load `<project_root>/.env` without clobbering variables already exported."""

    root = project_root or Path(__file__).resolve().parents[1]
    env_path = root / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


def load_settings() -> GameSettings:
    defaults = GameSettings()
    settings = GameSettings(
        stock_symbol=_env("SYMBOL") or defaults.stock_symbol,
        stock_name=_env("NAME") or defaults.stock_name,
        initial_cash=_env_float("INITIAL_CASH", defaults.initial_cash),
        tick_seconds=_env_float("TICK_SECONDS", defaults.tick_seconds),
        history_limit=_env_int("HISTORY_LIMIT", defaults.history_limit),
        milestone_step=_env_int("MILESTONE_STEP", defaults.milestone_step),
        reward_threshold=_env_float("REWARD_THRESHOLD", defaults.reward_threshold),
        reward_step=_env_float("REWARD_STEP", defaults.reward_step),
        reward_debounce_seconds=_env_float("REWARD_DEBOUNCE_SECONDS", defaults.reward_debounce_seconds),
        milestone_overlay_seconds=_env_float("MILESTONE_OVERLAY_SECONDS", defaults.milestone_overlay_seconds),
        reward_overlay_seconds=_env_float("REWARD_OVERLAY_SECONDS", defaults.reward_overlay_seconds),
        default_trade_amount=_env_int("DEFAULT_TRADE_AMOUNT", defaults.default_trade_amount),
        price_floor=_env_float("PRICE_FLOOR", defaults.price_floor),
        run_loop=_env_bool("RUN_LOOP", defaults.run_loop),
        event_feed=_env_bool("EVENT_FEED", defaults.event_feed),
    )
    if settings.milestone_step <= 0:
        raise ValueError(f"{ENV_PREFIX}MILESTONE_STEP must be positive")
    if settings.history_limit <= 0:
        raise ValueError(f"{ENV_PREFIX}HISTORY_LIMIT must be positive")
    return settings
