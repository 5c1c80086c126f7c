from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, cast

import redis

from stockgame.core.events import GameEvent

logger = logging.getLogger(__name__)


def feed_key(symbol: str) -> str:
    return f"stockgame:feed:{symbol}"


@dataclass(frozen=True, slots=True)
class FeedEntry:
    id: str
    event: str
    data: dict[str, Any]
    ts: str


class EventFeed:
    """Capped Redis Stream mirroring every broadcast event.

    Writes are best-effort: a Redis outage is logged once and otherwise ignored,
    so the overlay keeps running without Redis.
    """

    def __init__(self, *, r: redis.Redis, key: str, maxlen: int = 1_000, retry_seconds: float = 30.0) -> None:
        self.r = r
        self.key = key
        self.maxlen = maxlen
        self.retry_seconds = retry_seconds
        self._healthy = True
        # While Redis is failing, writes are skipped until this monotonic time.
        self._retry_at = 0.0

    def append(self, event: GameEvent) -> str | None:
        if not self._healthy and time.monotonic() < self._retry_at:
            return None

        fields = {
            "event": event.type,
            "data": json.dumps(event.payload),
            "ts": event.ts.isoformat(),
        }
        try:
            # redis-py stubs expect field/value unions; we only write string fields/values.
            stream_id = self.r.xadd(self.key, fields, maxlen=self.maxlen, approximate=True)  # type: ignore[arg-type]
        except redis.RedisError as e:
            if self._healthy:
                logger.warning("event feed unavailable (%s); continuing without it", e)
            self._healthy = False
            self._retry_at = time.monotonic() + self.retry_seconds
            return None

        if not self._healthy:
            logger.info("event feed recovered")
            self._healthy = True
        return cast(str, stream_id)

    def append_many(self, events: list[GameEvent]) -> list[str]:
        ids: list[str] = []
        for event in events:
            stream_id = self.append(event)
            if stream_id is not None:
                ids.append(stream_id)
        return ids

    def recent(self, *, count: int = 20) -> list[FeedEntry]:
        """Newest-last slice of the feed. Raises redis.RedisError if Redis is down."""

        raw = cast(list[tuple[str, dict[str, str]]], self.r.xrevrange(self.key, count=count))
        entries = [
            FeedEntry(
                id=stream_id,
                event=fields.get("event", ""),
                data=json.loads(fields.get("data") or "{}"),
                ts=fields.get("ts", ""),
            )
            for stream_id, fields in raw
        ]
        entries.reverse()
        return entries
