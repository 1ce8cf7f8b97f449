"""
Thermodynamics from an estimated density of states.

A Wang-Landau estimate ln g(E) determines canonical averages at every
temperature. The arbitrary additive constant of ln g cancels in averages and
only shifts the free energy.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union
import logging

import numpy as np
from scipy.special import logsumexp

logger = logging.getLogger(__name__)


@dataclass
class ThermodynamicAverages:
    """
    Canonical averages on a temperature grid.

    Attributes
    ----------
    temperatures : np.ndarray
        Temperatures T (k_B = 1).
    internal_energy : np.ndarray
        <E>(T).
    specific_heat : np.ndarray
        (<E²> - <E>²) / T².
    free_energy : np.ndarray
        -T ln Z, up to -T times the additive constant of ln g.
    """
    temperatures: np.ndarray
    internal_energy: np.ndarray
    specific_heat: np.ndarray
    free_energy: np.ndarray


def normalize_log_dos(
    ln_g: Sequence[float],
    total_states: Optional[float] = None,
    reference: Optional[int] = None
) -> np.ndarray:
    """
    Fix the additive constant of a log density of states.

    Parameters
    ----------
    ln_g : Sequence[float]
        Log density of states per bin.
    total_states : float, optional
        If given, shift so that Σ g = total_states (e.g. 2^N for N Ising
        spins).
    reference : int, optional
        If given (and ``total_states`` is not), shift so that
        ``ln_g[reference] == 0``. Defaults to the bin with the smallest
        value.

    Returns
    -------
    np.ndarray
        Shifted copy.
    """
    ln_g = np.asarray(ln_g, dtype=np.float64)
    if ln_g.size == 0:
        return ln_g.copy()

    if total_states is not None:
        if total_states <= 0:
            raise ValueError(f"total_states must be positive, got {total_states}")
        return ln_g - logsumexp(ln_g) + np.log(total_states)

    if reference is None:
        reference = int(np.argmin(ln_g))
    return ln_g - ln_g[reference]


def canonical_averages(
    energies: Sequence[float],
    ln_g: Sequence[float],
    temperatures: Union[float, Sequence[float]]
) -> ThermodynamicAverages:
    """
    Compute canonical averages from a density of states.

    Parameters
    ----------
    energies : Sequence[float]
        Energy of each bin (usually the bin centers).
    ln_g : Sequence[float]
        Log density of states of each bin.
    temperatures : float or Sequence[float]
        Temperatures at which to evaluate.

    Returns
    -------
    ThermodynamicAverages
        Averages on the temperature grid.
    """
    energies = np.asarray(energies, dtype=np.float64)
    ln_g = np.asarray(ln_g, dtype=np.float64)
    temperatures = np.atleast_1d(np.asarray(temperatures, dtype=np.float64))

    if energies.shape != ln_g.shape:
        raise ValueError(f"Shape mismatch: energies {energies.shape}, ln_g {ln_g.shape}")
    if np.any(temperatures <= 0):
        raise ValueError("Temperatures must be positive")

    # (n_temperatures, n_bins) log Boltzmann weights
    log_w = ln_g[None, :] - energies[None, :] / temperatures[:, None]
    log_z = logsumexp(log_w, axis=1)
    p = np.exp(log_w - log_z[:, None])

    e_mean = p @ energies
    e2_mean = p @ energies ** 2
    specific_heat = (e2_mean - e_mean ** 2) / temperatures ** 2

    return ThermodynamicAverages(
        temperatures=temperatures,
        internal_energy=e_mean,
        specific_heat=specific_heat,
        free_energy=-temperatures * log_z,
    )
