import importlib.util
import sys
from pathlib import Path
from types import ModuleType, SimpleNamespace


APP_ROOT = Path(__file__).resolve().parents[1]


def _tag_factory(name: str):
    def _tag(*args, **kwargs):
        return {"tag": name, "args": args, "kwargs": kwargs}

    return _tag


def _load_layout_module(monkeypatch):
    fake_ui = SimpleNamespace(
        page_sidebar=_tag_factory("page_sidebar"),
        sidebar=_tag_factory("sidebar"),
        h6=_tag_factory("h6"),
        HTML=_tag_factory("HTML"),
        layout_column_wrap=_tag_factory("layout_column_wrap"),
        card=_tag_factory("card"),
        card_header=_tag_factory("card_header"),
        div=_tag_factory("div"),
        span=_tag_factory("span"),
        output_ui=_tag_factory("output_ui"),
    )

    fake_shiny = ModuleType("shiny")
    fake_shiny.ui = fake_ui

    fake_shinyswatch = ModuleType("shinyswatch")
    fake_shinyswatch.theme_picker_ui = _tag_factory("theme_picker_ui")
    fake_shinyswatch.theme = SimpleNamespace(darkly="darkly")

    fake_config = ModuleType("sparkboard.config")
    fake_config.TIMESPAN_LABEL = "1h"
    fake_config.WIDGETS = {
        "cpu": SimpleNamespace(heading="CPU"),
        "memory": SimpleNamespace(heading="Memory"),
    }

    monkeypatch.setitem(sys.modules, "shiny", fake_shiny)
    monkeypatch.setitem(sys.modules, "shinyswatch", fake_shinyswatch)
    monkeypatch.setitem(sys.modules, "sparkboard.config", fake_config)

    module_name = "sparkboard.layout_under_test"
    sys.modules.pop(module_name, None)
    spec = importlib.util.spec_from_file_location(module_name, APP_ROOT / "layout.py")
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def _cards(module):
    wrap = next(
        arg for arg in module.app_ui["args"] if isinstance(arg, dict) and arg["tag"] == "layout_column_wrap"
    )
    return wrap["args"]


def test_layout_renders_one_card_per_widget(monkeypatch) -> None:
    module = _load_layout_module(monkeypatch)

    cards = _cards(module)

    assert [card["tag"] for card in cards] == ["card", "card"]
    assert [card["args"][1] for card in cards] == [
        {"tag": "output_ui", "args": ("widget_cpu",), "kwargs": {}},
        {"tag": "output_ui", "args": ("widget_memory",), "kwargs": {}},
    ]


def test_card_header_shows_heading_and_timespan(monkeypatch) -> None:
    module = _load_layout_module(monkeypatch)

    header = _cards(module)[0]["args"][0]
    title, timespan = header["args"][0]["args"]

    assert title["args"] == ("CPU",)
    assert timespan["args"] == ("1h",)


def test_layout_keeps_keepalive_script_and_theme(monkeypatch) -> None:
    module = _load_layout_module(monkeypatch)

    assert module.app_ui["tag"] == "page_sidebar"
    assert module.app_ui["kwargs"]["theme"] == "darkly"
    assert "shiny:disconnected" in module._KEEPALIVE_JS


def test_stats_panel_is_revealed_only_through_the_enabled_toggle(monkeypatch) -> None:
    module = _load_layout_module(monkeypatch)

    assert {"tag": "HTML", "args": (module._WIDGET_CSS,), "kwargs": {}} in module.app_ui["args"]
    assert ".co-sparkline .stats { display: none; }" in module._WIDGET_CSS
    assert ".widget__data-toggle--enabled:hover ~ .stats" in module._WIDGET_CSS
