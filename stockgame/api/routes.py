from __future__ import annotations

import redis
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from stockgame.actions import handle_gift, handle_message
from stockgame.api.deps import get_runtime
from stockgame.api.models import (
    FeedEntryModel,
    FeedResponse,
    GiftRequest,
    GiftResponse,
    MessageRequest,
    MessageResponse,
    OverlayConfig,
    StateSnapshot,
)
from stockgame.core.events import GameEvent
from stockgame.runtime import GameRuntime

router = APIRouter()


@router.websocket("/ws")
async def overlay_updates_ws(websocket: WebSocket, runtime: GameRuntime = Depends(get_runtime)) -> None:
    hub = runtime.hub
    await hub.connect(websocket)

    try:
        # New viewers get the current picture right away instead of waiting a tick.
        snapshot = GameEvent.now(type="state_update", payload=runtime.state.snapshot())
        await websocket.send_json(snapshot.to_message())
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/state", response_model=StateSnapshot)
async def get_state_route(runtime: GameRuntime = Depends(get_runtime)) -> StateSnapshot:
    return StateSnapshot.model_validate(runtime.state.snapshot())


@router.get("/api/config", response_model=OverlayConfig)
async def get_config_route(runtime: GameRuntime = Depends(get_runtime)) -> OverlayConfig:
    s = runtime.settings
    return OverlayConfig(
        stock_symbol=s.stock_symbol,
        stock_name=s.stock_name,
        milestone_overlay_ms=int(s.milestone_overlay_seconds * 1000),
        reward_overlay_ms=int(s.reward_overlay_seconds * 1000),
    )


@router.post("/api/message", response_model=MessageResponse, response_model_exclude_none=True)
async def message_route(payload: MessageRequest, runtime: GameRuntime = Depends(get_runtime)) -> MessageResponse:
    outcome = handle_message(
        state=runtime.state,
        user=payload.user,
        text=payload.text,
        default_amount=runtime.settings.default_trade_amount,
    )
    await runtime.publish(outcome.events)
    return MessageResponse(
        success=outcome.success,
        action=outcome.action,
        amount=outcome.amount,
        message=outcome.message,
    )


@router.post("/api/gift", response_model=GiftResponse)
async def gift_route(payload: GiftRequest, runtime: GameRuntime = Depends(get_runtime)) -> GiftResponse:
    try:
        outcome = handle_gift(
            state=runtime.state,
            user=payload.user,
            gift_value=payload.gift_value,
            gift_name=payload.gift_name,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    await runtime.publish(outcome.events)
    return GiftResponse(success=True, cash_added=outcome.cash_added)


@router.get("/api/events", response_model=FeedResponse)
async def recent_events_route(
    count: int = Query(20, ge=1, le=500),
    runtime: GameRuntime = Depends(get_runtime),
) -> FeedResponse:
    """Debug endpoint: read the most recent broadcast events from the Redis feed."""

    if runtime.feed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event feed disabled")
    try:
        entries = runtime.feed.recent(count=count)
    except redis.RedisError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Event feed unavailable: {e}") from e

    return FeedResponse(
        entries=[FeedEntryModel(id=e.id, event=e.event, data=e.data, ts=e.ts) for e in entries],
    )
