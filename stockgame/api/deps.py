from __future__ import annotations

from starlette.requests import HTTPConnection

from stockgame.runtime import GameRuntime


def get_runtime(conn: HTTPConnection) -> GameRuntime:
    # HTTPConnection covers both plain requests and WebSocket handshakes.
    runtime = getattr(conn.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError("Game runtime not initialized. Build the app with create_app().")
    return runtime
