"""Model contracts and accumulators shared by the sampling engines."""

from .model import MarkovChain, DirectSamplable
from .histogram import Histogram
from .statistics import RunningMean

__all__ = [
    "MarkovChain",
    "DirectSamplable",
    "Histogram",
    "RunningMean",
]
