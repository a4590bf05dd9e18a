import math

import pytest

from linkdiag.simulator import Sample
from linkdiag.window import window_from


def _sample(t, snr, ber, latency, retries):
    return Sample(t=t, snr_db=snr, ber=ber, latency_ms=latency, retries=retries)


HISTORY = [
    _sample(1, 10.0, 1e-3, 10.0, 0),
    _sample(2, 20.0, 2e-3, 20.0, 1),
    _sample(3, 30.0, 4e-3, 30.0, 3),
]


def test_window_over_full_history():
    w = window_from(HISTORY)
    assert w.snr_mean == pytest.approx(20.0)
    assert w.snr_std == pytest.approx(math.sqrt(200.0 / 3.0))
    assert w.ber_mean == pytest.approx(7e-3 / 3.0)
    assert w.ber_max == pytest.approx(4e-3)
    assert w.latency_mean == pytest.approx(20.0)
    assert w.retries_mean == pytest.approx(4.0 / 3.0)


def test_window_takes_trailing_samples():
    w = window_from(HISTORY, window_size=2)
    assert w.snr_mean == pytest.approx(25.0)
    assert w.snr_std == pytest.approx(5.0)
    assert w.ber_max == pytest.approx(4e-3)
    assert w.retries_mean == pytest.approx(2.0)


def test_single_sample_has_zero_spread():
    w = window_from(HISTORY[:1])
    assert w.snr_std == 0.0
    assert w.snr_mean == 10.0


@pytest.mark.parametrize("history,size", [([], 20), (HISTORY, 0), (HISTORY, -3)])
def test_empty_window_is_nan(history, size):
    w = window_from(history, window_size=size)
    for value in (w.snr_mean, w.snr_std, w.ber_mean, w.ber_max, w.latency_mean, w.retries_mean):
        assert math.isnan(value)
