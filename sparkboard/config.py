from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from sparkboard.units import UNIT_KINDS

_CONFIG_PATH = Path(__file__).parent / "config.yaml"


@dataclass(frozen=True)
class WidgetConfig:
    heading: str
    query: str
    limit: float | None = None
    units: str = "numeric"


def load_raw_config(config_path: Path = _CONFIG_PATH) -> dict:
    with config_path.open() as config_file:
        return yaml.safe_load(config_file) or {}


def _widget(key: str, value: Mapping[str, object]) -> WidgetConfig:
    query = str(value.get("query") or "").strip()
    if not query:
        raise ValueError(f"widgets.{key}.query must be set")
    units = str(value.get("units", "numeric"))
    if units not in UNIT_KINDS:
        raise ValueError(
            f"widgets.{key}.units {units!r} is not one of {sorted(UNIT_KINDS)}"
        )
    limit = value.get("limit")
    return WidgetConfig(
        heading=str(value.get("heading", key)),
        query=query,
        limit=None if limit is None else float(limit),
        units=units,
    )


def build_settings(raw_config: Mapping[str, Mapping]) -> dict:
    raw_widgets = raw_config.get("widgets")
    if not isinstance(raw_widgets, Mapping) or not raw_widgets:
        raise ValueError("config.yaml must define at least one widget under 'widgets'.")

    discovery = raw_config.get("discovery", {})
    server = raw_config.get("server", {})
    return {
        "widgets": {str(key): _widget(str(key), value) for key, value in raw_widgets.items()},
        "discovery_services": dict(discovery.get("services", {})),
        "discovery_probe_path": str(discovery.get("probe-path", "/-/ready")),
        "discovery_timeout_s": float(discovery.get("timeout-s", 5)),
        "query_timeout_s": float(raw_config.get("range-query", {}).get("timeout-s", 30)),
        "server_host": str(server.get("host", "127.0.0.1")),
        "server_port": int(server.get("port", 8009)),
    }


_SETTINGS = build_settings(load_raw_config())

WIDGETS = _SETTINGS["widgets"]
DISCOVERY_SERVICES = _SETTINGS["discovery_services"]
DISCOVERY_PROBE_PATH = _SETTINGS["discovery_probe_path"]
DISCOVERY_TIMEOUT_S = _SETTINGS["discovery_timeout_s"]
QUERY_TIMEOUT_S = _SETTINGS["query_timeout_s"]
SERVER_HOST = _SETTINGS["server_host"]
SERVER_PORT = _SETTINGS["server_port"]

TIMESPAN_LABEL = "1h"
