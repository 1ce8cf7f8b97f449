"""
Exceptions raised by the sampling engines and their containers.

Every fatal condition is a subclass of :class:`MarkovMCError`, so callers
can decide whether to abort or to retry with different parameters.
"""


class MarkovMCError(Exception):
    """Base class for all errors raised by markovmc."""


class PreconditionError(MarkovMCError, ValueError):
    """An argument or an object state violates a documented precondition."""


class EmptyHistogramError(PreconditionError):
    """The operation needs at least one strictly positive bin."""


class TooFewSamplesError(PreconditionError):
    """A running mean was finalized with fewer than two samples."""

    def __init__(self, count: int):
        super().__init__(f"too few samples: {count} (need at least 2)")
        self.count = count


class WindowNotReachedError(MarkovMCError, RuntimeError):
    """The chain could not be brought into the sampling window."""

    def __init__(self, low: float, high: float, attempts: int, energy: float):
        super().__init__(
            f"energy {energy} still outside ({low}, {high}) "
            f"after {attempts} attempts"
        )
        self.low = low
        self.high = high
        self.attempts = attempts
        self.energy = energy


class HistogramMismatchError(MarkovMCError, RuntimeError):
    """Two histograms that must share their binning disagree."""
