"""
Contracts between the sampling engines and user-supplied models.

The engines never inspect a model's internals; they only call the methods
declared here.
"""

from abc import ABC, abstractmethod

import numpy as np


class MarkovChain(ABC):
    """
    A model that can walk through its configuration space in small steps.

    Subclasses keep enough state to revert exactly one proposal. Calling
    :meth:`undo_last_change` twice without a proposal in between is
    undefined.
    """

    @abstractmethod
    def value(self) -> float:
        """
        The defining observable of the current state.

        For Metropolis and Wang-Landau sampling this is the energy. Must be
        a pure read.
        """
        pass

    @abstractmethod
    def propose_change(self, rng: np.random.Generator):
        """
        Move to a neighboring configuration.

        Parameters
        ----------
        rng : np.random.Generator
            Random stream owned by the running engine.
        """
        pass

    @abstractmethod
    def undo_last_change(self):
        """Revert the most recent :meth:`propose_change`."""
        pass

    def header(self) -> str:
        """Header line written above the retained samples."""
        return "# value"

    def serialize_sample(self) -> str:
        """
        Text written for each retained sample.

        Override to save several observables per sample, or to return a
        cached value if :meth:`value` is expensive.
        """
        return str(self.value())


class DirectSamplable(ABC):
    """A model that can draw independent configurations directly."""

    @abstractmethod
    def reconstruct(self, rng: np.random.Generator):
        """Replace the current configuration by a fresh independent draw."""
        pass

    @abstractmethod
    def value(self) -> float:
        pass
