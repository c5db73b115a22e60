"""Poll timing, single-flight fetches and teardown safety for one widget."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sparkboard.metrics.discovery import PROMETHEUS, ServiceDiscovery, Unavailable
from sparkboard.metrics.range_query import RangeQuery, RangeQueryClient
from sparkboard.metrics.state import (
    FetchEvent,
    WidgetSnapshot,
    WidgetState,
    WidgetStateMachine,
    classify,
)

POLL_INTERVAL_S = 30.0
# Keeps the loading state visible when a retry answers almost instantly.
RETRY_DELAY_S = 0.3

OnChange = Callable[[WidgetSnapshot], Awaitable[None]]


@dataclass
class PollSession:
    in_flight: bool = False
    alive: bool = True
    timer: asyncio.Task | None = None
    retry_handle: asyncio.TimerHandle | None = None
    fetch: asyncio.Task | None = None


class PollScheduler:
    """Drive fetches for one widget from a repeating timer and manual retries.

    Must be used from a running event loop. ``start`` is called once per
    scheduler; after ``stop`` every late outcome is dropped.
    """

    def __init__(
        self,
        discovery: ServiceDiscovery,
        client: RangeQueryClient,
        machine: WidgetStateMachine,
        on_change: OnChange | None = None,
        *,
        service_name: str = PROMETHEUS,
        interval_s: float = POLL_INTERVAL_S,
        retry_delay_s: float = RETRY_DELAY_S,
        clock: Callable[[], float] = time.time,
    ):
        self._discovery = discovery
        self._client = client
        self._machine = machine
        self._on_change = on_change
        self.service_name = service_name
        self.interval_s = interval_s
        self.retry_delay_s = retry_delay_s
        self._clock = clock
        self._query: RangeQuery | None = None
        self._session: PollSession | None = None

    @property
    def alive(self) -> bool:
        return self._session is not None and self._session.alive

    @property
    def in_flight(self) -> bool:
        return self._session is not None and self._session.in_flight

    @property
    def timer_armed(self) -> bool:
        return self._session is not None and self._session.timer is not None

    async def start(self, query: RangeQuery) -> None:
        self._query = query
        self._session = session = PollSession()
        self._machine.reset()
        await self._notify()
        self.tick()
        if session.alive and self._machine.state is not WidgetState.UNAVAILABLE:
            session.timer = asyncio.create_task(self._run_timer())

    def stop(self) -> None:
        session = self._session
        if session is None or not session.alive:
            return
        session.alive = False
        self._disarm(session)

    async def retry(self) -> bool:
        session = self._session
        if session is None or not session.alive or session.in_flight:
            return False
        if not self._machine.request_retry():
            return False
        await self._notify()
        if session.alive:
            loop = asyncio.get_running_loop()
            session.retry_handle = loop.call_later(self.retry_delay_s, self.tick)
        return True

    def tick(self) -> bool:
        """Start a fetch unless one is already running; return whether it did."""
        session = self._session
        if session is None or not session.alive:
            return False
        if self._machine.state is WidgetState.UNAVAILABLE:
            return False
        if session.in_flight:
            logging.debug("Fetch in flight [%s], dropping tick", self._query.metric_query)
            return False

        session.in_flight = True
        session.fetch = asyncio.create_task(self._fetch(session))
        return True

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            self.tick()

    def _disarm(self, session: PollSession) -> None:
        if session.timer is not None:
            session.timer.cancel()
            session.timer = None
        if session.retry_handle is not None:
            session.retry_handle.cancel()
            session.retry_handle = None

    async def _fetch(self, session: PollSession) -> None:
        outcome = None
        try:
            if session.alive:
                outcome = await self._attempt(session)
        except Exception:
            logging.exception("Unexpected fetch failure [%s]", self._query.metric_query)
            outcome = FetchEvent.TRANSPORT_ERROR, ()
        finally:
            session.in_flight = False

        if outcome is None or not session.alive:
            logging.debug("Discarding fetch outcome after stop [%s]", self._query.metric_query)
            return

        event, samples = outcome
        if event is FetchEvent.DISCOVERY_UNAVAILABLE:
            self._disarm(session)
        if self._machine.apply(event, samples):
            try:
                await self._notify()
            except Exception:
                logging.exception("Publishing widget state failed [%s]", self._query.metric_query)

    async def _attempt(self, session: PollSession):
        """Resolve the backend and run the query; None once the session is dead."""
        query = self._query
        found = await self._discovery.resolve(self.service_name)
        if isinstance(found, Unavailable):
            logging.warning(
                "Service %r unavailable (%s); polling stopped [%s]",
                self.service_name,
                found.reason,
                query.metric_query,
            )
            return FetchEvent.DISCOVERY_UNAVAILABLE, ()
        if not session.alive:
            return None

        end = self._clock()
        start = end - query.window_ms / 1000
        result = await self._client.query(
            found.base_url, query.metric_query, start, end, query.step_seconds
        )
        return classify(result)

    async def _notify(self) -> None:
        if self._on_change is not None:
            await self._on_change(self._machine.snapshot())
