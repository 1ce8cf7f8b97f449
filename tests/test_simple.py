"""Tests for direct sampling and the running mean."""

import io

import numpy as np
import pytest

from markovmc import RunningMean, Simple, SimpleConfig, TooFewSamplesError
from markovmc.models import GaussianModel


def test_running_mean_matches_numpy(rng):
    values = rng.normal(3.0, 2.0, size=500)
    acc = RunningMean()
    for x in values:
        acc.update(x)

    mean, variance = acc.finalize()
    assert mean == pytest.approx(np.mean(values))
    assert variance == pytest.approx(np.var(values))
    assert acc.sample_variance == pytest.approx(np.var(values, ddof=1))


def test_running_mean_small_example():
    acc = RunningMean()
    for x in (1.0, 2.0, 3.0, 4.0):
        acc.update(x)

    assert acc.finalize() == pytest.approx((2.5, 1.25))
    assert acc.count == 4


@pytest.mark.parametrize("n", [0, 1])
def test_running_mean_needs_two_samples(n):
    acc = RunningMean()
    for _ in range(n):
        acc.update(1.0)

    with pytest.raises(TooFewSamplesError):
        acc.finalize()


def test_gaussian_moments(rng):
    mean, variance = Simple(GaussianModel(2.0, 0.5), SimpleConfig(iterations=20000)).run(rng)

    assert mean == pytest.approx(2.0, abs=0.02)
    assert variance == pytest.approx(0.25, abs=0.02)


def test_writes_every_sample(rng):
    out = io.StringIO()
    Simple(GaussianModel(), SimpleConfig(iterations=10)).run(rng, output=out)

    values = [float(line) for line in out.getvalue().splitlines()]
    assert len(values) == 10


def test_single_sample_is_an_error(rng):
    with pytest.raises(TooFewSamplesError):
        Simple(GaussianModel(), SimpleConfig(iterations=1)).run(rng)
