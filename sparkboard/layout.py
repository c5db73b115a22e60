import shinyswatch
from shiny import ui

from sparkboard.config import TIMESPAN_LABEL, WIDGETS
from sparkboard.renders.render_utils import widget_output_id

# Stats stay hidden until the loaded widget's toggle is hovered
_WIDGET_CSS = """
<style>
.co-sparkline .widget__data-toggle { display: flex; justify-content: flex-end; padding: 0 0.75rem; }
.co-sparkline .widget__data-toggle--enabled { cursor: pointer; }
.co-sparkline .stats { display: none; }
.co-sparkline .widget__data-toggle--enabled:hover ~ .stats { display: flex; }
</style>
"""

# Web Worker keepalive + auto-reload on disconnect
_KEEPALIVE_JS = """
<script>
(function () {
  // Web Worker runs outside the throttled page context, so Chrome won't suspend it.
  // It fires a HEAD fetch every 20 s to keep the WebSocket ping/pong alive.
  var workerCode = 'setInterval(function () { postMessage("ping"); }, 20000);';
  var blob = new Blob([workerCode], { type: 'application/javascript' });
  var worker = new Worker(URL.createObjectURL(blob));
  worker.onmessage = function () {
    fetch(window.location.href, { method: 'HEAD', cache: 'no-store' }).catch(function () {});
  };

  // If the Shiny WebSocket closes for any reason, reload the page after 2 s.
  document.addEventListener('shiny:disconnected', function () {
    setTimeout(function () { window.location.reload(); }, 2000);
  });
})();
</script>
"""


def _widget_card(key: str, heading: str):
    return ui.card(
        ui.card_header(
            ui.div(
                ui.span(heading, class_="widget__title fw-bold"),
                ui.span(TIMESPAN_LABEL, class_="widget__timespan text-muted"),
                class_="d-flex justify-content-between align-items-center",
            )
        ),
        ui.output_ui(widget_output_id(key)),
        class_="co-sparkline",
    )


def _widget_cards():
    return [_widget_card(key, widget.heading) for key, widget in WIDGETS.items()]


app_ui = ui.page_sidebar(
    ui.sidebar(
        ui.h6("Theme"),
        shinyswatch.theme_picker_ui(),
        width=220,
    ),
    ui.HTML(_KEEPALIVE_JS),
    ui.HTML(_WIDGET_CSS),
    ui.layout_column_wrap(*_widget_cards(), width="320px", fill=False),
    title="Sparkboard",
    theme=shinyswatch.theme.darkly,
)
