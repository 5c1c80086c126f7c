from __future__ import annotations

import logging
import math

from statemachine import State, StateMachine

from stockgame.core.events import GameEvent
from stockgame.core.state import GameState

logger = logging.getLogger(__name__)

REWARD_MESSAGE = "🎉 TARGET REACHED! BONUS RELEASED!"


def milestone_message(milestone: float) -> str:
    return f"🎉 ASSETS SURPASSED ${milestone:,.0f}!"


def detect_milestones(state: GameState, *, step: int) -> list[GameEvent]:
    """Advance `last_milestone` one step at a time up to the current asset floor.

    One event per boundary crossed, ascending. Falling assets never move the
    milestone back down.
    """

    if not math.isfinite(state.total_assets):
        logger.warning("skipping milestone check, total assets not finite: %r", state.total_assets)
        return []

    current = math.floor(state.total_assets / step) * step
    events: list[GameEvent] = []

    next_milestone = state.last_milestone + step
    while next_milestone <= current:
        events.append(
            GameEvent.now(
                type="milestone_event",
                payload={"message": milestone_message(next_milestone), "totalAssets": next_milestone},
            )
        )
        state.last_milestone = next_milestone
        next_milestone += step

    if events:
        logger.info("milestones crossed: %s", [e.payload["totalAssets"] for e in events])
    return events


class RewardGate(StateMachine):
    """Debounce around the big reward.

    - armed: crossing the threshold fires a reward.
    - cooling_down: further crossings are ignored until the re-arm deadline passes.
    """

    armed = State("armed", value="armed", initial=True)
    cooling_down = State("cooling_down", value="cooling_down")

    release = armed.to(cooling_down)
    rearm = cooling_down.to(armed)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value="cooling_down" if game.reward_triggered else "armed")

    @property
    def ready(self) -> bool:
        return self.current_state.value == "armed"

    def sync_to_model(self) -> None:
        self.game.reward_triggered = not self.ready


def detect_reward(state: GameState, *, step: float, debounce_seconds: float, now: float) -> list[GameEvent]:
    """Fire at most one reward per threshold crossing.

    `now` is a monotonic clock reading; the pending flag clears on the first
    call at or after `reward_rearm_at`.
    """

    gate = RewardGate(state)

    if not gate.ready and (state.reward_rearm_at is None or now >= state.reward_rearm_at):
        gate.rearm()
        state.reward_rearm_at = None

    events: list[GameEvent] = []
    if gate.ready and state.total_assets > state.reward_threshold:
        gate.release()
        logger.info("reward threshold %.2f passed at %.2f", state.reward_threshold, state.total_assets)
        events.append(GameEvent.now(type="reward_trigger", payload={"message": REWARD_MESSAGE}))
        state.reward_threshold += step
        state.reward_rearm_at = now + debounce_seconds

    gate.sync_to_model()
    return events
