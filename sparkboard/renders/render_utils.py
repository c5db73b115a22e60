"""Shared helpers for Shiny render registration."""

from sparkboard.metrics.state import WidgetSnapshot, WidgetState
from sparkboard.metrics.stats import Stats
from sparkboard.units import humanize, humanize_limit

STATE_MESSAGES = {
    WidgetState.UNAVAILABLE: "Monitoring is not available for this cluster",
    WidgetState.TIMED_OUT: "Request timed out.",
    WidgetState.NO_DATA: "No data found",
    WidgetState.BROKEN: "Monitoring is misconfigured or broken",
}


def widget_output_id(key: str) -> str:
    return f"widget_{key}"


def retry_input_id(key: str) -> str:
    return f"retry_{key}"


def state_message(state: WidgetState) -> str | None:
    return STATE_MESSAGES.get(state)


def sample_values(snapshot: WidgetSnapshot) -> list[float]:
    if snapshot.state is not WidgetState.LOADED:
        return []
    return [sample.value for sample in snapshot.samples]


def stats_rows(stats: Stats, units: str) -> list[tuple[str, str]]:
    return [
        ("Limit", humanize_limit(stats.limit, units)),
        ("Median", humanize(stats.median, units)),
        ("95th Perc.", humanize(stats.p95, units)),
        ("Latest", humanize(stats.latest, units)),
    ]
