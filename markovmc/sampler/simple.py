"""
Direct sampling of independent configurations.
"""

from typing import Optional, TextIO, Tuple
import logging

import numpy as np
from tqdm import tqdm

from ..config import SimpleConfig
from ..core.model import DirectSamplable
from ..core.statistics import RunningMean

logger = logging.getLogger(__name__)


class Simple:
    """
    Draw independent samples and estimate mean and variance of the value.

    Parameters
    ----------
    model : DirectSamplable
        Model able to draw fresh configurations.
    config : SimpleConfig
        Number of samples.
    """

    def __init__(self, model: DirectSamplable, config: Optional[SimpleConfig] = None):
        self.model = model
        self.config = config or SimpleConfig()

    def run(
        self,
        rng: np.random.Generator,
        output: Optional[TextIO] = None,
        progress_bar: bool = False
    ) -> Tuple[float, float]:
        """
        Draw ``iterations`` samples, writing each value to ``output``.

        Returns
        -------
        Tuple[float, float]
            Mean and population variance of the sampled values.

        Raises
        ------
        TooFewSamplesError
            If fewer than two samples were drawn.
        """
        mean = RunningMean()

        iterator = range(self.config.iterations)
        if progress_bar:
            iterator = tqdm(iterator, desc="Direct sampling")

        for _ in iterator:
            self.model.reconstruct(rng)
            val = self.model.value()
            mean.update(val)
            if output is not None:
                output.write(f"{val}\n")

        result = mean.finalize()
        logger.info(f"Direct sampling: mean = {result[0]:.6g}, variance = {result[1]:.6g}")
        return result
