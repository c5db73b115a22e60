"""Sparkline widget renders: state messages, chart, stats and retry."""

from collections.abc import Callable, Mapping

from faicons import icon_svg
from shiny import reactive, render, ui

from sparkboard.config import WidgetConfig
from sparkboard.metrics.state import WidgetSnapshot, WidgetState
from sparkboard.renders.render_utils import (
    retry_input_id,
    sample_values,
    state_message,
    stats_rows,
    widget_output_id,
)
from sparkboard.sparkline import sparkline
from sparkboard.units import humanize

_TIMEOUT_ICON = icon_svg("circle-question", fill="currentColor", height="1em")
_BROKEN_ICON = icon_svg("ban", fill="currentColor", height="1em")
_STATS_ICON = icon_svg("table", fill="currentColor", height="1em")


def _stats_panel(rows: list[tuple[str, str]]):
    return ui.div(
        *[
            ui.tags.dl(
                ui.tags.dt(title, class_="stats__item-title small text-muted"),
                ui.tags.dd(value, class_="stats__item-value mb-0"),
                class_="stats__item mb-0",
            )
            for title, value in rows
        ],
        class_="stats justify-content-between px-3 pb-2",
    )


def widget_body(key: str, widget: WidgetConfig, snapshot: WidgetSnapshot):
    state = snapshot.state
    if state is WidgetState.LOADING:
        return ui.div(
            ui.span(class_="spinner-border spinner-border-sm", role="status"),
            " Loading…",
            class_="widget__text p-2",
        )
    if state is WidgetState.TIMED_OUT:
        return ui.p(
            _TIMEOUT_ICON,
            f" {state_message(state)} ",
            ui.input_action_link(retry_input_id(key), "Retry"),
            class_="widget__text p-2",
        )
    if state is WidgetState.BROKEN:
        return ui.p(
            _BROKEN_ICON,
            f" {state_message(state)}",
            class_="widget__text widget__text--error text-danger p-2",
        )
    if state is WidgetState.LOADED:
        # Hovering the toggle reveals the stats panel (see layout CSS).
        return ui.div(
            ui.span(
                _STATS_ICON,
                class_="widget__data-toggle widget__data-toggle--enabled",
                title="Stats",
            ),
            sparkline(
                sample_values(snapshot),
                limit=widget.limit,
                fmt=lambda v: humanize(v, widget.units),
            ),
            _stats_panel(stats_rows(snapshot.stats, widget.units)),
            class_="widget__data",
        )
    return ui.p(state_message(state), class_="widget__text p-2")


def register_widget_renders(
    input,
    output,
    widgets: Mapping[str, WidgetConfig],
    snapshots: Mapping[str, reactive.Value],
    on_retry: Callable[[str], None],
) -> None:
    """Register one body render and one retry effect per widget."""
    for key, widget in widgets.items():
        _register_widget(input, output, key, widget, snapshots[key], on_retry)


def _register_widget(input, output, key, widget, snapshot, on_retry) -> None:
    @render.ui
    def _body():
        return widget_body(key, widget, snapshot())

    output(_body, id=widget_output_id(key))

    @reactive.effect
    @reactive.event(input[retry_input_id(key)])
    def _retry():
        on_retry(key)
