"""Summary statistics shown beside a loaded sparkline."""

from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from sparkboard.metrics.range_query import Sample


@dataclass(frozen=True)
class Stats:
    median: float
    p95: float
    latest: float
    limit: float | None = None


def compute_stats(samples: Sequence[Sample], limit: float | None = None) -> Stats:
    """Median, linear-interpolated 95th percentile and latest value.

    ``samples`` must be ascending by timestamp; ``latest`` is the last element.
    """
    if not samples:
        raise ValueError("cannot compute stats for an empty sample set")

    values = pd.Series([sample.value for sample in samples], dtype="float64")
    return Stats(
        median=float(values.median()),
        p95=float(values.quantile(0.95, interpolation="linear")),
        latest=samples[-1].value,
        limit=limit,
    )
