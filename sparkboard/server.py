import asyncio

import shinyswatch
from shiny import reactive

from sparkboard.config import (
    DISCOVERY_PROBE_PATH,
    DISCOVERY_SERVICES,
    DISCOVERY_TIMEOUT_S,
    QUERY_TIMEOUT_S,
    WIDGETS,
)
from sparkboard.metrics.controller import SparklineController
from sparkboard.metrics.discovery import HttpServiceDiscovery
from sparkboard.metrics.range_query import RangeQueryClient
from sparkboard.metrics.state import WidgetSnapshot, WidgetState
from sparkboard.renders.widgets import register_widget_renders


def server(input, output, session):
    shinyswatch.theme_picker_server()

    discovery = HttpServiceDiscovery(
        DISCOVERY_SERVICES,
        probe_path=DISCOVERY_PROBE_PATH,
        timeout_s=DISCOVERY_TIMEOUT_S,
    )
    client = RangeQueryClient(timeout_s=QUERY_TIMEOUT_S)

    # ── Widget state ──────────────────────────────────────────────────────────
    snapshots: dict[str, reactive.Value] = {
        k: reactive.Value(WidgetSnapshot(WidgetState.LOADING)) for k in WIDGETS
    }

    async def on_change(key: str, snapshot: WidgetSnapshot):
        async with reactive.lock():
            snapshots[key].set(snapshot)
            await reactive.flush()

    controllers = {
        k: SparklineController(
            w.query,
            discovery,
            client,
            lambda s, k=k: on_change(k, s),
            limit=w.limit,
        )
        for k, w in WIDGETS.items()
    }

    # ── Start polling at session open; stop at session end ────────────────────
    tasks: set[asyncio.Task] = set()

    def _spawn(coro):
        task = asyncio.create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    for c in controllers.values():
        _spawn(c.start())

    def _teardown():
        for c in controllers.values():
            c.stop()
        for t in list(tasks):
            t.cancel()

    session.on_ended(_teardown)

    # Retries run as tasks so they publish outside the current reactive flush.
    def on_retry(key: str):
        _spawn(controllers[key].retry())

    # ── Register renders ──────────────────────────────────────────────────────
    register_widget_renders(input, output, WIDGETS, snapshots, on_retry)
