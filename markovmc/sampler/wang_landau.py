"""
Wang-Landau estimation of the density of states.

Implements the "fast" 1/t variant of the Wang-Landau algorithm, followed by
an entropic sampling run that removes the residual bias of the estimate.

References
----------
* Wang & Landau, Phys. Rev. Lett. 86, 2050 (2001)
* Belardinelli & Pereyra, Phys. Rev. E 75, 046701 (2007)
* Belardinelli & Pereyra, J. Chem. Phys. 127, 184105 (2007)
* Dickman & Cunha-Netto, Phys. Rev. E 84, 026701 (2011)
"""

from enum import Enum
from typing import List, Optional, TextIO, Tuple
import logging
import time

import numpy as np
from tqdm import tqdm

from .mcmc import MCMCSampler, SamplingStats
from ..config import WangLandauConfig
from ..core.histogram import Histogram
from ..core.model import MarkovChain
from ..exceptions import (
    EmptyHistogramError,
    HistogramMismatchError,
    PreconditionError,
    WindowNotReachedError,
)
from ..io import write_density_of_states

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Stage of a Wang-Landau run."""
    IDLE = "idle"
    START = "start"
    HALVING = "halving"
    POWER_LAW = "power-law"
    ENTROPIC = "entropic"
    DONE = "done"


class WangLandau(MCMCSampler):
    """
    Wang-Landau sampler estimating ln g(E) inside an energy window.

    The run has three phases:

    1. The refinement parameter ``lnf`` starts at 1 and is halved each time
       every bin of the visit histogram ``h`` has been hit, until
       ``lnf <= 1/t``.
    2. ``lnf = 1/t`` decays as a power law down to ``lnf_final``.
    3. Entropic sampling with the bias ``g`` frozen, for twice the elapsed
       time, measures the remaining visit distribution which is then added
       to ``g``.

    The result is a log density of states up to an arbitrary additive
    constant.

    Parameters
    ----------
    model : MarkovChain
        The chain to sample; ``value()`` is the energy. Owned by the sampler.
    config : WangLandauConfig
        Window, binning, sweep size and final refinement parameter.

    Examples
    --------
    >>> config = WangLandauConfig(low=-26, high=26, bins=13, sweep=16, lnf_final=1e-5)
    >>> wl = WangLandau(IsingModel(4), config)
    >>> tries, rejects = wl.run(np.random.default_rng(42))
    >>> for energy, ln_g in wl.density_of_states():
    ...     print(energy, ln_g)
    """

    def __init__(self, model: MarkovChain, config: WangLandauConfig):
        super().__init__(model)
        self.config = config

        self._g = Histogram(config.low, config.high, config.bins)
        self._h = Histogram(config.low, config.high, config.bins)

        self._t = 0
        self._lnf = 1.0
        self._phase = Phase.IDLE
        self._tries = 0
        self._rejects = 0
        self.emergency = False
        self.skipped_power_law = False

    @property
    def g(self) -> Histogram:
        """Estimate of ln g(E)."""
        return self._g

    @property
    def h(self) -> Histogram:
        """Visit histogram."""
        return self._h

    @property
    def t(self) -> int:
        """Elapsed outer steps (groups of ``sweep`` proposals)."""
        return self._t

    @property
    def lnf(self) -> float:
        return self._lnf

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def stats(self) -> SamplingStats:
        return SamplingStats(self._tries, self._rejects)

    def density_of_states(self) -> List[Tuple[float, float]]:
        """The ``(bin center, ln g)`` pairs in ascending energy order."""
        return [(float(c), float(d)) for c, d in zip(self._g.centers(), self._g.data())]

    def find_start(self, rng: np.random.Generator) -> int:
        """
        Walk the chain into the open window ``(low, high)``.

        A proposal that moves further away from the window on the side the
        chain is on is undone. Without ``max_start_attempts`` this does not
        terminate for a model that cannot reach the window.

        Returns
        -------
        int
            Number of proposals made.

        Raises
        ------
        WindowNotReachedError
            If ``max_start_attempts`` proposals did not reach the window.
        """
        low, high = self.config.low, self.config.high
        max_attempts = self.config.max_start_attempts

        attempts = 0
        new_e = self.model.value()
        while not (low < new_e < high):
            if max_attempts is not None and attempts >= max_attempts:
                raise WindowNotReachedError(low, high, attempts, new_e)

            old_e = self.model.value()
            self.model.propose_change(rng)
            attempts += 1
            new_e = self.model.value()

            if (new_e < low and old_e > new_e) or (new_e > high and old_e < new_e):
                self.model.undo_last_change()
                new_e = old_e

        logger.info(f"Found start energy {new_e} after {attempts} proposals")
        return attempts

    def _step(self, rng: np.random.Generator) -> float:
        """
        One proposal with the acceptance rule on the current bias ``g``.

        A proposal is accepted with probability min(1, exp(g(old) - g(new))).
        If either energy lies outside the histogram it is rejected.

        Returns
        -------
        float
            Energy after the step.
        """
        old_e = self.model.value()
        self.model.propose_change(rng)
        new_e = self.model.value()

        old_g = self._g.at(old_e)
        new_g = self._g.at(new_e)

        if old_g is None or new_g is None:
            accept = False
        else:
            delta = old_g - new_g
            accept = delta >= 0 or np.exp(delta) >= rng.random()

        if not accept:
            self.model.undo_last_change()
            new_e = old_e

        self._tries += 1
        if new_e == old_e:
            self._rejects += 1

        return new_e

    def _emergency_trim(self):
        """Narrow ``g`` and ``h`` to the bins visited so far."""
        logger.warning(
            "Spent 20% of the time in phase 1 at lnf = 1: trimming the histogram and proceeding. "
            "The results of this simulation may be inaccurate; "
            "restart with a different range or a smaller lnf_final."
        )
        self._g.trim()
        self._h.trim()
        logger.warning(f"g = {self._g!r}")
        logger.warning(f"h = {self._h!r}")

        if (
            self._g.bounds() != self._h.bounds()
            or self._g.bins != self._h.bins
            or self._g.low_inclusive != self._h.low_inclusive
        ):
            raise HistogramMismatchError(
                f"g {self._g.bounds()} and h {self._h.bounds()} disagree after trimming"
            )

    def _run_halving(self, rng: np.random.Generator, progress_bar: bool):
        """Phase 1: halve lnf whenever every bin has been visited."""
        self._phase = Phase.HALVING
        cfg = self.config

        pbar = tqdm(desc="WL phase 1", unit="batch", disable=not progress_bar)
        try:
            while self._t < 10 or self._lnf > 1.0 / self._t:
                logger.info(f"ln f = {self._lnf}, t = {self._t}")

                while self._h.min() == 0:
                    for _ in range(cfg.batch_size):
                        for _ in range(cfg.sweep):
                            new_e = self._step(rng)
                            self._g.add(new_e, self._lnf)
                            self._h.count(new_e)
                        self._t += 1
                    pbar.update(1)

                    if self._lnf == 1.0 and cfg.lnf_final > 0.2 / self._t:
                        self._emergency_trim()
                        self.emergency = True
                        self._lnf = cfg.lnf_final
                        self._h.reset()
                        return

                self._h.reset()
                self._lnf /= 2.0
        finally:
            pbar.close()

    def _run_power_law(self, rng: np.random.Generator, progress_bar: bool):
        """Phase 2: lnf = 1/t until it falls below lnf_final."""
        self._phase = Phase.POWER_LAW
        cfg = self.config

        logger.info(f"Begin phase 2 (power-law decrease) at t = {self._t}")

        # 1/lnf_final overflows to inf for subnormal values
        t_final = 1.0 / cfg.lnf_final
        total = max(int(np.ceil(t_final)) - self._t, 0) if np.isfinite(t_final) else None

        pbar = tqdm(desc="WL phase 2", total=total, disable=not progress_bar)
        try:
            while self._lnf > cfg.lnf_final:
                self._lnf = 1.0 / self._t

                for _ in range(cfg.sweep):
                    new_e = self._step(rng)
                    self._g.add(new_e, self._lnf)
                self._t += 1
                pbar.update(1)
        finally:
            pbar.close()

    def _run_entropic(self, rng: np.random.Generator, progress_bar: bool):
        """Phase 3: sample with the frozen bias, counting visits only."""
        self._phase = Phase.ENTROPIC
        t_limit = 2 * self._t

        logger.info(
            f"Begin phase 3 (entropic sampling) at t = {self._t} until t = {self._t + t_limit}"
        )

        iterator = range(t_limit)
        if progress_bar:
            iterator = tqdm(iterator, desc="WL phase 3")

        for _ in iterator:
            for _ in range(self.config.sweep):
                new_e = self._step(rng)
                self._h.count(new_e)

    def _remove_bias(self):
        """Add the normalized visit histogram of phase 3 to ``g``."""
        h_mean = self._h.mean()
        if h_mean == 0:
            raise EmptyHistogramError("entropic sampling recorded no visits")

        for j in range(self._g.bins):
            self._g[j] += self._h[j] / h_mean

    def run(
        self,
        rng: np.random.Generator,
        output: Optional[TextIO] = None,
        progress_bar: bool = False
    ) -> SamplingStats:
        """
        Estimate the density of states.

        Parameters
        ----------
        rng : np.random.Generator
            Random stream for proposals and acceptance.
        output : TextIO, optional
            Stream receiving one ``"center ln_g"`` line per bin.
        progress_bar : bool
            Whether to show progress bars.

        Returns
        -------
        SamplingStats
            Proposals and rejections summed over all phases.

        Raises
        ------
        PreconditionError
            If the sampler already ran.
        WindowNotReachedError
            If the start search exhausted ``max_start_attempts``.
        """
        if self._phase is not Phase.IDLE:
            raise PreconditionError("WangLandau.run() may only be called once per instance")

        start_time = time.time()
        cfg = self.config

        self._phase = Phase.START
        self.find_start(rng)

        self._t = 0
        self._lnf = 1.0

        self._run_halving(rng, progress_bar)

        if not self.emergency and self._lnf <= cfg.lnf_final:
            self.skipped_power_law = True
            logger.warning(
                "Phase 1 took too long, phase 2 will not be performed. "
                "The results of this simulation may be inaccurate; "
                "restart with a different range, smaller windows or a smaller lnf_final."
            )

        self._run_power_law(rng, progress_bar)
        self._run_entropic(rng, progress_bar)
        self._remove_bias()
        self._phase = Phase.DONE

        if output is not None:
            write_density_of_states(output, self.density_of_states())

        stats = self.stats
        logger.info(
            f"Wang-Landau completed: t = {self._t}, {stats.tries} proposals, "
            f"acceptance rate {stats.acceptance_rate:.2%}, "
            f"{time.time() - start_time:.2f}s"
        )

        return stats
