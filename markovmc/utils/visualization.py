"""
Visualization utilities for sampling results.
"""

from typing import Optional, Sequence, Tuple
import logging

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..analysis import canonical_averages, normalize_log_dos
from ..core.histogram import Histogram

logger = logging.getLogger(__name__)


def plot_density_of_states(
    energies: Sequence[float],
    ln_g: Sequence[float],
    exact: Optional[Sequence[float]] = None,
    figsize: Tuple[int, int] = (10, 5),
    title: str = "Density of States"
) -> Figure:
    """
    Plot an estimated log density of states.

    Both curves are shifted so their smallest value is zero, which removes
    the arbitrary additive constant.

    Parameters
    ----------
    energies : Sequence[float]
        Bin centers.
    ln_g : Sequence[float]
        Estimated ln g(E).
    exact : Sequence[float], optional
        Exact ln g(E) at the same energies, for comparison.
    figsize : Tuple[int, int]
        Figure size.
    title : str
        Plot title.

    Returns
    -------
    matplotlib.figure.Figure
        The figure object.
    """
    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(energies, normalize_log_dos(ln_g), 'bo-', markersize=4, label='Wang-Landau')

    if exact is not None:
        ax.plot(energies, normalize_log_dos(exact), 'r--', linewidth=2, label='Exact')

    ax.set_xlabel('Energy')
    ax.set_ylabel('ln g(E)')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_visit_histogram(
    histogram: Histogram,
    figsize: Tuple[int, int] = (10, 4),
    title: str = "Visit Histogram"
) -> Figure:
    """
    Plot the contents of a histogram as bars, marking its mean.

    A flat visit histogram means the bias has converged.
    """
    fig, ax = plt.subplots(figsize=figsize)

    borders = histogram.borders()
    ax.bar(
        borders[:-1],
        histogram.data(),
        width=np.diff(borders),
        align='edge',
        alpha=0.7,
        edgecolor='black'
    )

    mean = histogram.mean()
    ax.axhline(y=mean, color='r', linestyle='--', label=f'Mean: {mean:.3g}')

    ax.set_xlabel('Energy')
    ax.set_ylabel('Visits')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_sample_trace(
    values: Sequence[float],
    window_size: int = 50,
    figsize: Tuple[int, int] = (12, 5),
    title: str = "Sample Trace"
) -> Figure:
    """
    Plot retained samples of a Metropolis run with a running mean.

    Parameters
    ----------
    values : Sequence[float]
        Sampled observable.
    window_size : int
        Window size for smoothing.
    figsize : Tuple[int, int]
        Figure size.
    title : str
        Plot title.

    Returns
    -------
    matplotlib.figure.Figure
        The figure object.
    """
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize, gridspec_kw={'width_ratios': [3, 1]})

    values = np.asarray(values, dtype=np.float64)
    steps = np.arange(len(values))

    ax1.plot(steps, values, 'b-', alpha=0.5, linewidth=0.5)

    if len(values) > window_size:
        kernel = np.ones(window_size) / window_size
        smoothed = np.convolve(values, kernel, mode='valid')
        ax1.plot(
            np.arange(len(smoothed)) + window_size // 2,
            smoothed,
            'r-',
            linewidth=2,
            label=f'Smoothed (window={window_size})'
        )
        ax1.legend()

    ax1.set_xlabel('Sweep')
    ax1.set_ylabel('Value')
    ax1.set_title(title)
    ax1.grid(True, alpha=0.3)

    ax2.hist(values, bins=50, orientation='horizontal', density=True, alpha=0.7, edgecolor='black')
    ax2.axhline(y=values.mean(), color='r', linestyle='--', label=f'Mean: {values.mean():.3f}')
    ax2.set_xlabel('Density')
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def create_summary_plot(
    sampler,
    temperatures: Optional[Sequence[float]] = None,
    figsize: Tuple[int, int] = (14, 10)
) -> Figure:
    """
    Create a summary plot of a finished Wang-Landau run.

    Parameters
    ----------
    sampler : WangLandau
        Sampler after :meth:`~markovmc.sampler.WangLandau.run`.
    temperatures : Sequence[float], optional
        Temperature grid for the canonical averages. Defaults to a grid
        spanning the energy scale of the window.
    figsize : Tuple[int, int]
        Figure size.

    Returns
    -------
    matplotlib.figure.Figure
        The summary figure.
    """
    energies = sampler.g.centers()
    ln_g = np.asarray(sampler.g.data())

    if temperatures is None:
        scale = max(abs(sampler.g.high - sampler.g.low) / max(sampler.g.bins, 1), 1e-3)
        temperatures = np.linspace(0.2, 5.0, 200) * scale

    thermo = canonical_averages(energies, ln_g, temperatures)

    fig, axes = plt.subplots(2, 2, figsize=figsize)

    ax = axes[0, 0]
    ax.plot(energies, normalize_log_dos(ln_g), 'bo-', markersize=3)
    ax.set_xlabel('Energy')
    ax.set_ylabel('ln g(E)')
    ax.set_title('Density of States')
    ax.grid(True, alpha=0.3)

    ax = axes[0, 1]
    borders = sampler.h.borders()
    ax.bar(borders[:-1], sampler.h.data(), width=np.diff(borders), align='edge', alpha=0.7)
    ax.axhline(y=sampler.h.mean(), color='r', linestyle='--', alpha=0.7)
    ax.set_xlabel('Energy')
    ax.set_ylabel('Visits')
    ax.set_title('Entropic Sampling Visits')
    ax.grid(True, alpha=0.3)

    ax = axes[1, 0]
    ax.plot(thermo.temperatures, thermo.internal_energy, 'g-', linewidth=2)
    ax.set_xlabel('Temperature')
    ax.set_ylabel('<E>')
    ax.set_title('Internal Energy')
    ax.grid(True, alpha=0.3)

    ax = axes[1, 1]
    ax.plot(thermo.temperatures, thermo.specific_heat, 'r-', linewidth=2)
    ax.set_xlabel('Temperature')
    ax.set_ylabel('C')
    ax.set_title('Specific Heat')
    ax.grid(True, alpha=0.3)

    stats = sampler.stats
    plt.suptitle(
        f'Wang-Landau Summary | t = {sampler.t} | Proposals: {stats.tries} | '
        f'Acceptance: {stats.acceptance_rate:.2%}',
        fontsize=12
    )

    plt.tight_layout()
    return fig
