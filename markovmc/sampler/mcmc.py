"""
MCMC samplers for models implementing :class:`MarkovChain`.

Holds the sampler base class, the statistics every run returns and the
Metropolis sampler at fixed temperature.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, TextIO
import logging
import time

import numpy as np
from tqdm import tqdm

from ..config import MetropolisConfig
from ..core.model import MarkovChain

logger = logging.getLogger(__name__)


class SamplingStats(NamedTuple):
    """
    Proposal statistics of one run.

    Unpacks as the ``(tries, rejects)`` pair.

    Attributes
    ----------
    tries : int
        Number of proposals made.
    rejects : int
        Number of proposals that left the observable unchanged.
    """
    tries: int
    rejects: int

    @property
    def acceptance_rate(self) -> float:
        if self.tries == 0:
            return 0.0
        return 1.0 - self.rejects / self.tries


class MCMCSampler(ABC):
    """Abstract base class for samplers driving one Markov chain."""

    def __init__(self, model: MarkovChain):
        self.model = model

    @abstractmethod
    def run(
        self,
        rng: np.random.Generator,
        output: Optional[TextIO] = None,
        progress_bar: bool = False
    ) -> SamplingStats:
        """
        Run the sampler.

        Parameters
        ----------
        rng : np.random.Generator
            Random stream used for proposals and acceptance.
        output : TextIO, optional
            Stream receiving the sampler's data lines.
        progress_bar : bool
            Whether to show progress bars.

        Returns
        -------
        SamplingStats
            Proposal statistics.
        """
        pass


class Metropolis(MCMCSampler):
    """
    Metropolis sampler at fixed temperature.

    Samples configurations with probability ∝ exp(-E / T), where E is the
    model's :meth:`~MarkovChain.value`. A proposal raising the energy by ΔE
    is accepted with probability exp(-ΔE / T).

    Parameters
    ----------
    model : MarkovChain
        The chain to sample. It is owned by the sampler for the whole run.
    config : MetropolisConfig
        Temperature, sweep size, equilibration and sample counts.

    Examples
    --------
    >>> sampler = Metropolis(IsingModel(8), MetropolisConfig(
    ...     temperature=2.269, sweep=64, t_eq=100, iterations=1000))
    >>> tries, rejects = sampler.run(np.random.default_rng(0), output=f)
    """

    def __init__(self, model: MarkovChain, config: Optional[MetropolisConfig] = None):
        super().__init__(model)
        self.config = config or MetropolisConfig()

    def run(
        self,
        rng: np.random.Generator,
        output: Optional[TextIO] = None,
        progress_bar: bool = False
    ) -> SamplingStats:
        """
        Equilibrate for ``t_eq`` sweeps, then retain ``iterations`` samples.

        After every retained sweep the model's
        :meth:`~MarkovChain.serialize_sample` is written to ``output``,
        preceded once by its :meth:`~MarkovChain.header`.
        """
        start_time = time.time()
        cfg = self.config

        tries = 0
        rejects = 0

        beta = 1.0 / cfg.temperature
        energy_new = self.model.value()

        if output is not None:
            output.write(self.model.header() + "\n")

        iterator = range(cfg.t_eq + cfg.iterations)
        if progress_bar:
            iterator = tqdm(iterator, desc="Metropolis")

        for i in iterator:
            for _ in range(cfg.sweep):
                energy_old = energy_new
                self.model.propose_change(rng)
                tries += 1
                energy_new = self.model.value()

                log_accept = (energy_old - energy_new) * beta
                if log_accept < 0 and np.exp(log_accept) < rng.random():
                    self.model.undo_last_change()
                    rejects += 1
                    energy_new = energy_old

            if i >= cfg.t_eq and output is not None:
                output.write(self.model.serialize_sample() + "\n")

        stats = SamplingStats(tries, rejects)
        logger.info(
            f"Metropolis completed at T = {cfg.temperature}: {tries} proposals, "
            f"acceptance rate {stats.acceptance_rate:.2%}, "
            f"{time.time() - start_time:.2f}s"
        )

        return stats

    def downhill(self, rng: np.random.Generator, steps: int) -> float:
        """
        Greedy descent: undo every proposal that raises the energy.

        Parameters
        ----------
        rng : np.random.Generator
            Random stream for proposals.
        steps : int
            Number of proposals.

        Returns
        -------
        float
            Energy after the last step.
        """
        energy_new = self.model.value()

        for _ in range(steps):
            energy_old = energy_new
            self.model.propose_change(rng)
            energy_new = self.model.value()

            if energy_old < energy_new:
                self.model.undo_last_change()
                energy_new = energy_old

        return energy_new

    def uphill(self, rng: np.random.Generator, steps: int) -> float:
        """Greedy ascent: undo every proposal that lowers the energy."""
        energy_new = self.model.value()

        for _ in range(steps):
            energy_old = energy_new
            self.model.propose_change(rng)
            energy_new = self.model.value()

            if energy_old > energy_new:
                self.model.undo_last_change()
                energy_new = energy_old

        return energy_new
