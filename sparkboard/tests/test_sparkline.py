import importlib.util
import sys
from pathlib import Path
from types import ModuleType


APP_ROOT = Path(__file__).resolve().parents[1]


def _load_sparkline_module(monkeypatch):
    fake_shiny = ModuleType("shiny")
    fake_shiny.ui = ModuleType("shiny.ui")
    fake_shiny.ui.HTML = lambda value: value

    monkeypatch.setitem(sys.modules, "shiny", fake_shiny)

    module_name = "sparkboard.sparkline_under_test"
    sys.modules.pop(module_name, None)
    spec = importlib.util.spec_from_file_location(module_name, APP_ROOT / "sparkline.py")
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def test_sparkline_returns_empty_string_without_values(monkeypatch) -> None:
    sparkline_module = _load_sparkline_module(monkeypatch)

    html = sparkline_module.sparkline([])

    assert html == ""


def test_sparkline_draws_single_value_as_flat_line(monkeypatch) -> None:
    sparkline_module = _load_sparkline_module(monkeypatch)

    html = sparkline_module.sparkline([7.0])

    assert "<polyline" in html
    assert "justify-content:flex-end" in html
    assert html.count("<div>7</div>") == 1


def test_sparkline_renders_single_stat_for_flat_series(monkeypatch) -> None:
    sparkline_module = _load_sparkline_module(monkeypatch)

    html = sparkline_module.sparkline([2.0, 2.0], fmt=lambda value: f"{value:.0f}x")

    assert "justify-content:flex-end" in html
    assert html.count("<div>2x</div>") == 1


def test_sparkline_renders_min_max_with_custom_formatter(monkeypatch) -> None:
    sparkline_module = _load_sparkline_module(monkeypatch)

    html = sparkline_module.sparkline(
        [1.0, 3.5, 2.0],
        fmt=lambda value: f"[{value:.1f}]",
    )

    assert "<div>[3.5]</div><div>[1.0]</div>" in html
    assert 'stroke="#64b5f6"' in html
    assert "stroke-dasharray" not in html


def test_sparkline_draws_limit_only_inside_plotted_range(monkeypatch) -> None:
    sparkline_module = _load_sparkline_module(monkeypatch)

    inside = sparkline_module.sparkline([0.0, 10.0], limit=5.0)
    outside = sparkline_module.sparkline([0.0, 10.0], limit=50.0)

    assert 'stroke-dasharray="3,2"' in inside
    assert 'y1="17.0"' in inside
    assert "stroke-dasharray" not in outside
