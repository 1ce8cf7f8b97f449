"""Smoke tests for the plotting helpers."""

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import numpy as np

from markovmc import WangLandau, WangLandauConfig
from markovmc.core.histogram import Histogram
from markovmc.models import DiscreteLevelModel
from markovmc.utils import (
    create_summary_plot,
    plot_density_of_states,
    plot_sample_trace,
    plot_visit_histogram,
)


def test_density_of_states_plot():
    fig = plot_density_of_states([0.0, 1.0, 2.0], [1.0, 2.0, 1.5], exact=[0.0, 1.1, 0.4])
    assert isinstance(fig, Figure)
    plt.close(fig)


def test_visit_histogram_plot():
    hist = Histogram(0.0, 3.0, 3)
    hist.add(0.5, 4.0)
    hist.add(2.5, 2.0)

    fig = plot_visit_histogram(hist)
    assert isinstance(fig, Figure)
    plt.close(fig)


def test_sample_trace_plot(rng):
    fig = plot_sample_trace(rng.normal(size=200), window_size=20)
    assert isinstance(fig, Figure)
    plt.close(fig)


def test_summary_plot(rng):
    config = WangLandauConfig(low=0.0, high=3.0, bins=3, lnf_final=1e-3, batch_size=100)
    sampler = WangLandau(DiscreteLevelModel([0.5, 1.5, 2.5], [1, 4, 1]), config)
    sampler.run(rng)

    fig = create_summary_plot(sampler, temperatures=np.linspace(0.5, 3.0, 20))
    assert isinstance(fig, Figure)
    plt.close(fig)
