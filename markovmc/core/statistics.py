"""
Online statistics for streams of samples.
"""

from typing import Tuple

from ..exceptions import TooFewSamplesError


class RunningMean:
    """
    Welford's online algorithm for mean and variance.

    ``mean`` accumulates the mean of all values seen so far and ``m2`` the
    sum of squared distances from it.

    Examples
    --------
    >>> acc = RunningMean()
    >>> for x in (1.0, 2.0, 3.0):
    ...     acc.update(x)
    >>> acc.finalize()
    (2.0, 0.6666666666666666)
    """

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self.m2 = 0.0

    def update(self, new_value: float):
        self.count += 1
        delta = new_value - self.mean
        self.mean += delta / self.count
        delta2 = new_value - self.mean
        self.m2 += delta * delta2

    def _check(self):
        if self.count < 2:
            raise TooFewSamplesError(self.count)

    @property
    def variance(self) -> float:
        """Population variance ``m2 / n``."""
        self._check()
        return self.m2 / self.count

    @property
    def sample_variance(self) -> float:
        """Unbiased sample variance ``m2 / (n - 1)``."""
        self._check()
        return self.m2 / (self.count - 1)

    def finalize(self) -> Tuple[float, float]:
        """
        Mean and population variance of all values seen.

        Raises
        ------
        TooFewSamplesError
            If fewer than two values were added.
        """
        return self.mean, self.variance
