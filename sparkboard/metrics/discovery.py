"""Service discovery: decide whether a metrics backend is reachable."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import httpx

PROMETHEUS = "prometheus"

# Probe answers that mean the service is not there at all.
_ABSENT_STATUSES = frozenset({404, 410})


@dataclass(frozen=True)
class Available:
    base_url: str


@dataclass(frozen=True)
class Unavailable:
    reason: str = ""


Discovery = Available | Unavailable


class ServiceDiscovery(Protocol):
    async def resolve(self, service_name: str) -> Discovery:
        ...


class HttpServiceDiscovery:
    """Resolve configured services by probing their readiness endpoint.

    Only definite absence is reported as ``Unavailable``: a missing config
    entry, a refused connection, or a 404/410 from the probe. Timeouts and
    server errors resolve to ``Available`` so the range query runs and
    reports the recoverable failure itself.
    """

    def __init__(
        self,
        services: Mapping[str, str],
        *,
        probe_path: str = "/-/ready",
        timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._services = dict(services)
        self.probe_path = probe_path
        self.timeout_s = timeout_s
        self._transport = transport

    async def resolve(self, service_name: str) -> Discovery:
        base_url = self._services.get(service_name)
        if not base_url:
            return Unavailable(f"{service_name} is not configured")

        probe_url = f"{base_url.rstrip('/')}{self.probe_path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.get(probe_url)
        except httpx.ConnectError as exc:
            logging.warning("Discovery probe refused [%s] (%s)", service_name, exc)
            return Unavailable(f"{type(exc).__name__}: {exc}")
        except httpx.HTTPError as exc:
            logging.warning(
                "Discovery probe inconclusive [%s] (%s: %s)",
                service_name,
                type(exc).__name__,
                exc,
            )
            return Available(base_url)

        if response.status_code in _ABSENT_STATUSES:
            return Unavailable(f"probe returned HTTP {response.status_code}")
        if not response.is_success:
            logging.warning(
                "Discovery probe returned HTTP %s [%s]", response.status_code, service_name
            )
        return Available(base_url)
