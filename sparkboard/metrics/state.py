"""Widget presentation states and the transitions between them."""

import logging
from dataclasses import dataclass
from enum import Enum

from sparkboard.metrics.range_query import (
    Failure,
    RangeResult,
    Sample,
    Success,
    TransportError,
)
from sparkboard.metrics.stats import Stats, compute_stats


class WidgetState(str, Enum):
    LOADING = "loading"
    UNAVAILABLE = "notavailable"
    TIMED_OUT = "timedout"
    NO_DATA = "nodata"
    BROKEN = "broken"
    LOADED = "loaded"


class FetchEvent(str, Enum):
    DISCOVERY_UNAVAILABLE = "discovery_unavailable"
    QUERY_FAILED = "query_failed"
    QUERY_EMPTY = "query_empty"
    QUERY_LOADED = "query_loaded"
    TRANSPORT_TIMEOUT = "transport_timeout"
    TRANSPORT_ERROR = "transport_error"
    RETRY = "retry"


_OUTCOME_TARGETS = {
    FetchEvent.DISCOVERY_UNAVAILABLE: WidgetState.UNAVAILABLE,
    FetchEvent.QUERY_FAILED: WidgetState.BROKEN,
    FetchEvent.QUERY_EMPTY: WidgetState.NO_DATA,
    FetchEvent.QUERY_LOADED: WidgetState.LOADED,
    FetchEvent.TRANSPORT_TIMEOUT: WidgetState.TIMED_OUT,
    FetchEvent.TRANSPORT_ERROR: WidgetState.BROKEN,
}

RETRYABLE = frozenset({WidgetState.TIMED_OUT, WidgetState.NO_DATA, WidgetState.BROKEN})

# UNAVAILABLE has no outgoing edges.
TRANSITIONS: dict[tuple[WidgetState, FetchEvent], WidgetState] = {
    (state, event): target
    for state in WidgetState
    if state is not WidgetState.UNAVAILABLE
    for event, target in _OUTCOME_TARGETS.items()
}
TRANSITIONS.update({(state, FetchEvent.RETRY): WidgetState.LOADING for state in RETRYABLE})


@dataclass(frozen=True)
class WidgetSnapshot:
    state: WidgetState
    samples: tuple[Sample, ...] = ()
    stats: Stats | None = None


def classify(result: RangeResult) -> tuple[FetchEvent, tuple[Sample, ...]]:
    """Map a range-query result onto the event it drives.

    Only the first returned series is plotted.
    """
    if isinstance(result, TransportError):
        if result.is_timeout:
            return FetchEvent.TRANSPORT_TIMEOUT, ()
        return FetchEvent.TRANSPORT_ERROR, ()
    if isinstance(result, Failure):
        return FetchEvent.QUERY_FAILED, ()
    if isinstance(result, Success):
        if not result.series or not result.series[0].samples:
            return FetchEvent.QUERY_EMPTY, ()
        return FetchEvent.QUERY_LOADED, result.series[0].samples
    raise TypeError(f"unknown range result: {result!r}")


class WidgetStateMachine:
    def __init__(self, *, limit: float | None = None):
        self.limit = limit
        self._state = WidgetState.LOADING
        self._samples: tuple[Sample, ...] = ()
        self._stats: Stats | None = None

    @property
    def state(self) -> WidgetState:
        return self._state

    @property
    def samples(self) -> tuple[Sample, ...]:
        return self._samples

    @property
    def stats(self) -> Stats | None:
        return self._stats

    def reset(self) -> None:
        self._state = WidgetState.LOADING
        self._samples = ()
        self._stats = None

    def apply(self, event: FetchEvent, samples: tuple[Sample, ...] = ()) -> bool:
        """Apply ``event``; return False when the table has no such edge."""
        target = TRANSITIONS.get((self._state, event))
        if target is None:
            logging.debug("Ignoring %s in state %s", event.value, self._state.value)
            return False

        if event is FetchEvent.QUERY_LOADED:
            if not samples:
                raise ValueError("a loaded outcome needs at least one sample")
            self._samples = tuple(samples)
            self._stats = compute_stats(self._samples, self.limit)
        elif event is FetchEvent.QUERY_EMPTY:
            self._samples = ()
            self._stats = None
        elif target is not WidgetState.LOADED:
            self._stats = None

        self._state = target
        return True

    def request_retry(self) -> bool:
        return self.apply(FetchEvent.RETRY)

    def snapshot(self) -> WidgetSnapshot:
        if self._state is WidgetState.LOADED:
            return WidgetSnapshot(self._state, self._samples, self._stats)
        return WidgetSnapshot(self._state)
