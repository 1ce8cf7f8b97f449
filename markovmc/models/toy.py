"""
Small models with known properties, for validation and demos.
"""

from typing import Dict, Optional, Sequence

import numpy as np

from ..core.model import DirectSamplable, MarkovChain


class DiscreteLevelModel(MarkovChain):
    """
    Microstates grouped into energy levels of known degeneracy.

    Each proposal jumps to a microstate drawn uniformly from all of them,
    which is a symmetric proposal. The exact density of states is
    ``g(E_k) = degeneracies[k]``.

    Parameters
    ----------
    energies : Sequence[float]
        Energy of each level.
    degeneracies : Sequence[int]
        Number of microstates of each level.
    initial : int, optional
        Index of the starting microstate. Defaults to the first one.

    Examples
    --------
    >>> model = DiscreteLevelModel([0.25, 0.75], [1, 3])
    >>> model.log_density_of_states()
    {0.25: 0.0, 0.75: 1.0986122886681098}
    """

    def __init__(
        self,
        energies: Sequence[float],
        degeneracies: Sequence[int],
        initial: int = 0
    ):
        if len(energies) != len(degeneracies):
            raise ValueError(
                f"Got {len(energies)} energies but {len(degeneracies)} degeneracies"
            )
        if any(d < 1 for d in degeneracies):
            raise ValueError(f"Degeneracies must be positive, got {list(degeneracies)}")

        self.energies = [float(e) for e in energies]
        self.degeneracies = [int(d) for d in degeneracies]
        self._levels = np.repeat(np.arange(len(self.energies)), self.degeneracies)

        if not 0 <= initial < len(self._levels):
            raise ValueError(f"Initial microstate {initial} out of range")

        self.state = initial
        self._previous = initial

    @property
    def n_microstates(self) -> int:
        return len(self._levels)

    def value(self) -> float:
        return self.energies[self._levels[self.state]]

    def propose_change(self, rng: np.random.Generator):
        self._previous = self.state
        self.state = int(rng.integers(0, self.n_microstates))

    def undo_last_change(self):
        self.state = self._previous

    def log_density_of_states(self) -> Dict[float, float]:
        """Exact ln g(E) per level."""
        return {e: float(np.log(d)) for e, d in zip(self.energies, self.degeneracies)}


class TwoStateModel(MarkovChain):
    """Energy alternates between two fixed values on every proposal."""

    def __init__(self, first: float, second: float):
        self.values = (float(first), float(second))
        self.state = 0

    def value(self) -> float:
        return self.values[self.state]

    def propose_change(self, rng: np.random.Generator):
        self.state = 1 - self.state

    def undo_last_change(self):
        self.state = 1 - self.state


class GaussianModel(DirectSamplable):
    """
    Independent draws from a normal distribution.

    Parameters
    ----------
    mean : float
        Mean of the distribution.
    std : float
        Standard deviation.
    """

    def __init__(self, mean: float = 0.0, std: float = 1.0, x: Optional[float] = None):
        if std <= 0:
            raise ValueError(f"std must be positive, got {std}")
        self.mean = mean
        self.std = std
        self.x = mean if x is None else x

    def reconstruct(self, rng: np.random.Generator):
        self.x = float(rng.normal(self.mean, self.std))

    def value(self) -> float:
        return self.x
