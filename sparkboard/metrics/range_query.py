"""Prometheus range-query client with explicit result variants."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

WINDOW_MS = 60 * 60 * 1000  # 1 hour
STEP_SECONDS = 30


@dataclass(frozen=True)
class Sample:
    timestamp: float  # seconds
    value: float


@dataclass(frozen=True)
class Series:
    samples: tuple[Sample, ...]
    labels: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RangeQuery:
    metric_query: str
    window_ms: int = WINDOW_MS
    step_seconds: int = STEP_SECONDS


@dataclass(frozen=True)
class Success:
    series: tuple[Series, ...]


@dataclass(frozen=True)
class Failure:
    status: str
    error: str | None = None


@dataclass(frozen=True)
class TransportError:
    is_timeout: bool
    detail: str = ""


RangeResult = Success | Failure | TransportError


def parse_samples(values) -> tuple[Sample, ...]:
    return tuple(Sample(float(ts), float(value)) for ts, value in values)


def parse_payload(payload) -> RangeResult:
    if not isinstance(payload, Mapping):
        return Failure("invalid", f"expected JSON object, got {type(payload).__name__}")

    status = payload.get("status")
    if status != "success":
        return Failure(str(status), payload.get("error"))

    try:
        series = tuple(
            Series(parse_samples(item.get("values") or ()), dict(item.get("metric") or {}))
            for item in payload["data"]["result"]
        )
    except (KeyError, TypeError, ValueError) as exc:
        return Failure("invalid", f"{type(exc).__name__}: {exc}")
    return Success(series)


def parse_response(response: httpx.Response) -> RangeResult:
    try:
        payload = response.json()
    except ValueError:
        return Failure("invalid", f"HTTP {response.status_code}: body is not JSON")
    return parse_payload(payload)


class RangeQueryClient:
    """Issue one ``/api/v1/query_range`` request per call.

    Transport problems are returned as ``TransportError`` rather than raised,
    so callers only ever branch on the result type.
    """

    def __init__(self, *, timeout_s: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout_s = timeout_s
        self._transport = transport

    async def query(
        self,
        base_url: str,
        metric_query: str,
        start_s: float,
        end_s: float,
        step_s: int,
    ) -> RangeResult:
        url = f"{base_url.rstrip('/')}/api/v1/query_range"
        params = {"query": metric_query, "start": start_s, "end": end_s, "step": step_s}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            logging.warning("Range query timed out [%s]: %s", metric_query, exc)
            return TransportError(is_timeout=True, detail=str(exc))
        except httpx.HTTPError as exc:
            logging.warning(
                "Range query failed [%s] (%s: %s)",
                metric_query,
                type(exc).__name__,
                exc,
            )
            return TransportError(is_timeout=False, detail=f"{type(exc).__name__}: {exc}")

        result = parse_response(response)
        if isinstance(result, Failure):
            logging.warning(
                "Range query returned status %r [%s]: %s",
                result.status,
                metric_query,
                result.error,
            )
        return result
