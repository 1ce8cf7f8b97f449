"""
One-dimensional histogram with equal-width bins.

Used both as the running estimate of the logarithmic density of states and
as a visit counter by the Wang-Landau engine.
"""

from typing import List, Optional, Tuple
import logging

import numpy as np

from ..exceptions import EmptyHistogramError, PreconditionError

logger = logging.getLogger(__name__)


class Histogram:
    """
    Accumulator mapping the open interval ``(low, high)`` onto equal bins.

    A value ``v`` belongs to bin ``floor((v - low) / (high - low) * bins)``.
    Both edges are excluded: values ``<= low`` or ``>= high`` are silently
    ignored by :meth:`add` and :meth:`count`, and :meth:`at` returns None
    for them.

    After :meth:`trim` has removed leading bins, ``low`` is an interior
    border of the original range and becomes inclusive, so every value that
    belonged to a surviving bin still belongs to it.

    Parameters
    ----------
    low : float
        Lower bound of the range (excluded).
    high : float
        Upper bound of the range (excluded).
    bins : int
        Number of bins.

    Raises
    ------
    PreconditionError
        If ``low >= high`` or ``bins < 1``.

    Examples
    --------
    >>> hist = Histogram(0.0, 2.0, 2)
    >>> hist.add(0.5, 1.0)
    >>> hist.count(1.5)
    >>> hist.min()
    1.0
    """

    def __init__(self, low: float, high: float, bins: int):
        if not low < high:
            raise PreconditionError(f"low must be smaller than high, got ({low}, {high})")
        if bins < 1:
            raise PreconditionError(f"bins must be positive, got {bins}")

        self._low = float(low)
        self._high = float(high)
        self._bins = int(bins)
        self._low_inclusive = False
        self._data = np.zeros(self._bins, dtype=np.float64)

    @property
    def low(self) -> float:
        return self._low

    @property
    def high(self) -> float:
        return self._high

    @property
    def bins(self) -> int:
        return self._bins

    @property
    def low_inclusive(self) -> bool:
        """True once :meth:`trim` has moved ``low`` onto a bin border."""
        return self._low_inclusive

    def __len__(self) -> int:
        return self._bins

    def __getitem__(self, idx: int) -> float:
        return float(self._data[idx])

    def __setitem__(self, idx: int, value: float):
        self._data[idx] = value

    def __repr__(self) -> str:
        return (
            f"Histogram(low={self._low}, high={self._high}, bins={self._bins}, "
            f"data={np.array2string(self._data, threshold=20)})"
        )

    def index(self, value: float) -> Optional[int]:
        """
        Bin index owning ``value``, or None if it lies outside the range.
        """
        if not value < self._high:
            return None
        if value < self._low or (value == self._low and not self._low_inclusive):
            return None

        idx = int((value - self._low) / (self._high - self._low) * self._bins)
        # rounding may push values just below high onto the upper edge
        return min(idx, self._bins - 1)

    def add(self, value: float, amount: float):
        """
        Add ``amount`` to the bin owning ``value``.

        Values outside the range are ignored.
        """
        idx = self.index(value)
        if idx is not None:
            self._data[idx] += amount

    def count(self, value: float):
        """Increment the bin owning ``value`` by one."""
        self.add(value, 1.0)

    def at(self, value: float) -> Optional[float]:
        """
        Current content of the bin owning ``value``.

        Returns
        -------
        float or None
            Bin content, or None if ``value`` lies outside the range.
        """
        idx = self.index(value)
        if idx is None:
            return None
        return float(self._data[idx])

    def reset(self):
        """Set every bin to zero."""
        self._data.fill(0.0)

    def min(self) -> float:
        """Smallest bin content. Zero means at least one bin is empty."""
        return float(self._data.min())

    def total(self) -> float:
        return float(self._data.sum())

    def mean(self) -> float:
        """Sum of all bins divided by the number of bins."""
        return self.total() / self._bins

    def bounds(self) -> Tuple[float, float]:
        return self._low, self._high

    def trim(self) -> Tuple[int, int]:
        """
        Remove empty bins from both ends of the histogram.

        Only bins with a strictly positive content count as populated. The
        bounds are moved by the removed fraction of the original range, so
        the width of the remaining bins is unchanged. A value that mapped to
        a surviving bin before the trim maps to the same bin afterwards.

        Returns
        -------
        Tuple[int, int]
            Number of bins removed on the left and on the right.

        Raises
        ------
        EmptyHistogramError
            If no bin holds a positive value.
        """
        populated = np.flatnonzero(self._data > 0)
        if populated.size == 0:
            raise EmptyHistogramError(f"cannot trim a histogram without positive bins: {self!r}")

        left = int(populated[0])
        right = int(populated[-1])
        n_right = self._bins - 1 - right

        if left == 0 and n_right == 0:
            return 0, 0

        span = self._high - self._low
        new_low = self._low + span * left / self._bins
        new_high = self._low + span * (right + 1) / self._bins

        self._data = self._data[left:right + 1].copy()
        self._low = new_low
        self._high = new_high
        self._bins = right - left + 1
        # the old left border of the first kept bin belonged to that bin
        if left > 0:
            self._low_inclusive = True

        logger.debug(f"Trimmed {left} leading and {n_right} trailing bins -> {self.bounds()}")

        return left, n_right

    def left_border(self, n: int) -> float:
        return (n / self._bins) * (self._high - self._low) + self._low

    def right_border(self, n: int) -> float:
        return ((n + 1) / self._bins) * (self._high - self._low) + self._low

    def borders(self) -> np.ndarray:
        """The ``bins + 1`` bin edges in ascending order."""
        return np.array([self.left_border(n) for n in range(self._bins + 1)])

    def centers(self) -> np.ndarray:
        """Bin centers in ascending order."""
        return np.array([
            (self.left_border(n) + self.right_border(n)) / 2.0
            for n in range(self._bins)
        ])

    def data(self) -> np.ndarray:
        """Read-only view of the bin contents."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def hist(self) -> List[Tuple[float, float]]:
        """Bin contents as ``(left border, value)`` pairs."""
        return [(self.left_border(n), float(x)) for n, x in enumerate(self._data)]

    def copy(self) -> "Histogram":
        clone = Histogram(self._low, self._high, self._bins)
        clone._low_inclusive = self._low_inclusive
        clone._data[:] = self._data
        return clone
