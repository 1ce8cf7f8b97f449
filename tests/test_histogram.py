"""Tests for the equal-width histogram."""

import numpy as np
import pytest

from markovmc.core.histogram import Histogram
from markovmc.exceptions import EmptyHistogramError, PreconditionError


def test_values_land_in_their_bins():
    hist = Histogram(0.0, 2.0, 2)
    hist.add(0.5, 1.0)
    hist.add(1.5, 1.0)

    assert hist[0] == 1.0
    assert hist[1] == 1.0
    assert hist.min() == 1.0


def test_count_increments_by_one():
    hist = Histogram(0.0, 10.0, 10)
    for _ in range(3):
        hist.count(4.2)

    assert hist.at(4.2) == 3.0
    assert hist.at(4.9) == 3.0
    assert hist.at(5.1) == 0.0


@pytest.mark.parametrize("value", [-1.0, 0.0, 2.0, 3.5])
def test_out_of_range_values_are_ignored(value):
    hist = Histogram(0.0, 2.0, 2)
    hist.add(value, 5.0)
    hist.count(value)

    assert hist.at(value) is None
    assert hist.index(value) is None
    assert hist.total() == 0.0


def test_both_edges_are_excluded():
    hist = Histogram(-1.0, 1.0, 4)

    assert hist.at(-1.0) is None
    assert hist.at(1.0) is None
    assert hist.at(np.nextafter(-1.0, 0.0)) == 0.0
    assert hist.index(np.nextafter(1.0, 0.0)) == 3


def test_add_is_linear():
    hist = Histogram(0.0, 1.0, 5)
    hist.add(0.3, 0.7)
    before = hist.data().copy()

    hist.add(0.35, 2.5)
    hist.add(0.35, -2.5)

    np.testing.assert_allclose(hist.data(), before)


def test_constructor_rejects_bad_bounds():
    with pytest.raises(PreconditionError, match="low must be smaller"):
        Histogram(1.0, 1.0, 10)
    with pytest.raises(ValueError):
        Histogram(2.0, 1.0, 10)
    with pytest.raises(PreconditionError, match="bins must be positive"):
        Histogram(0.0, 1.0, 0)


def test_mean_divides_by_bin_count():
    hist = Histogram(0.0, 4.0, 4)
    hist.add(0.5, 1.0)
    hist.add(1.5, 3.0)

    assert hist.mean() == 1.0
    assert hist.min() == 0.0


def test_reset_clears_all_bins():
    hist = Histogram(0.0, 1.0, 3)
    hist.count(0.1)
    hist.count(0.9)
    hist.reset()

    assert hist.total() == 0.0


def test_derived_views():
    hist = Histogram(0.0, 2.0, 2)
    hist.count(1.2)

    np.testing.assert_allclose(hist.centers(), [0.5, 1.5])
    np.testing.assert_allclose(hist.borders(), [0.0, 1.0, 2.0])
    assert hist.hist() == [(0.0, 0.0), (1.0, 1.0)]
    assert hist.bounds() == (0.0, 2.0)
    assert len(hist) == 2


def test_data_view_is_read_only():
    hist = Histogram(0.0, 1.0, 2)
    with pytest.raises(ValueError):
        hist.data()[0] = 1.0


def test_direct_index_write():
    hist = Histogram(0.0, 1.0, 4)
    hist[2] = 7.5
    hist[2] += 0.5

    assert hist.at(0.6) == 8.0


def test_trim_removes_empty_edges():
    hist = Histogram(0.0, 10.0, 10)
    for v in (3.5, 4.5, 5.5, 6.5):
        hist.add(v, 2.0)
    total = hist.total()

    removed = hist.trim()

    assert removed == (3, 3)
    assert hist.bins == 4
    assert hist.low == 3.0
    assert hist.high == 7.0
    assert hist.total() == total
    np.testing.assert_allclose(hist.data(), [2.0, 2.0, 2.0, 2.0])
    assert hist.at(3.5) == 2.0
    assert hist.at(7.5) is None


def test_trim_keeps_interior_zeros_and_bin_width():
    hist = Histogram(-1.0, 1.0, 8)
    hist.count(-0.6)
    hist.count(0.3)

    hist.trim()

    assert hist.bins == 5
    assert hist.bounds() == pytest.approx((-0.75, 0.5))
    np.testing.assert_allclose(hist.data(), [1.0, 0.0, 0.0, 0.0, 1.0])


def test_trim_only_one_side():
    hist = Histogram(0.0, 4.0, 4)
    hist.count(0.5)
    hist.count(1.5)

    assert hist.trim() == (0, 2)
    assert hist.bounds() == (0.0, 2.0)


def test_trim_is_noop_when_edges_populated():
    hist = Histogram(0.0, 3.0, 3)
    hist.count(0.5)
    hist.count(2.5)

    assert hist.trim() == (0, 0)
    assert hist.bins == 3
    assert hist.bounds() == (0.0, 3.0)


def test_trim_on_empty_histogram_fails():
    hist = Histogram(0.0, 1.0, 5)

    with pytest.raises(EmptyHistogramError):
        hist.trim()
    assert hist.bins == 5


def test_trim_ignores_negative_bins():
    hist = Histogram(0.0, 3.0, 3)
    hist.add(0.5, -1.0)
    hist.add(1.5, 1.0)

    hist.trim()

    assert hist.bounds() == (1.0, 2.0)


def test_copy_is_independent():
    hist = Histogram(0.0, 1.0, 2)
    hist.count(0.2)
    clone = hist.copy()
    clone.count(0.2)

    assert hist.at(0.2) == 1.0
    assert clone.at(0.2) == 2.0


def test_trim_keeps_values_on_the_new_lower_border():
    hist = Histogram(0.0, 4.0, 4)
    hist.count(1.0)
    hist.count(2.5)
    assert hist.at(1.0) == 1.0

    assert hist.trim() == (1, 1)

    assert hist.bounds() == (1.0, 3.0)
    assert hist.low_inclusive
    assert hist.index(1.0) == 0
    assert hist.at(1.0) == 1.0
    assert hist.at(2.5) == 1.0
    assert hist.at(0.999) is None
    assert hist.at(3.0) is None

    hist.count(1.0)
    np.testing.assert_allclose(hist.data(), [2.0, 1.0])
    assert hist.copy().at(1.0) == 2.0


def test_untrimmed_lower_edge_stays_excluded():
    hist = Histogram(0.0, 4.0, 4)
    hist.count(0.5)
    hist.count(3.5)
    hist.trim()

    assert not hist.low_inclusive
    assert hist.at(0.0) is None
