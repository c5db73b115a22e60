import pytest

from sparkboard.metrics.range_query import Sample
from sparkboard.metrics.stats import Stats, compute_stats


def _samples(*values: float) -> tuple[Sample, ...]:
    return tuple(Sample(1_700_000_000 + 30 * i, value) for i, value in enumerate(values))


def test_three_samples_give_median_p95_and_latest() -> None:
    stats = compute_stats(_samples(10.0, 20.0, 30.0))

    assert stats.median == 20.0
    assert 28.0 <= stats.p95 <= 30.0
    assert stats.p95 == pytest.approx(29.0)
    assert stats.latest == 30.0
    assert stats.limit is None


def test_single_sample_is_every_statistic() -> None:
    assert compute_stats(_samples(7.5), limit=10.0) == Stats(
        median=7.5, p95=7.5, latest=7.5, limit=10.0
    )


def test_percentile_ignores_order_but_latest_is_last_element() -> None:
    stats = compute_stats(_samples(30.0, 10.0, 20.0, 40.0))

    assert stats.median == 25.0
    assert stats.p95 == pytest.approx(38.5)
    assert stats.latest == 40.0


def test_even_count_median_interpolates() -> None:
    assert compute_stats(_samples(1.0, 2.0, 3.0, 4.0)).median == 2.5


def test_empty_sample_set_is_rejected() -> None:
    with pytest.raises(ValueError):
        compute_stats(())
