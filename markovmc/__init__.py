"""
markovmc: Markov-chain Monte Carlo sampling toolkit

Wang-Landau estimation of the density of states, Metropolis sampling and
direct sampling for user-supplied models.
"""

__version__ = "0.1.0"

from .config import WangLandauConfig, MetropolisConfig, SimpleConfig, load_config
from .core import MarkovChain, DirectSamplable, Histogram, RunningMean
from .exceptions import (
    MarkovMCError,
    PreconditionError,
    EmptyHistogramError,
    TooFewSamplesError,
    WindowNotReachedError,
    HistogramMismatchError,
)
from .sampler import WangLandau, Metropolis, Simple, SamplingStats, Phase

__all__ = [
    "WangLandauConfig",
    "MetropolisConfig",
    "SimpleConfig",
    "load_config",
    "MarkovChain",
    "DirectSamplable",
    "Histogram",
    "RunningMean",
    "MarkovMCError",
    "PreconditionError",
    "EmptyHistogramError",
    "TooFewSamplesError",
    "WindowNotReachedError",
    "HistogramMismatchError",
    "WangLandau",
    "Metropolis",
    "Simple",
    "SamplingStats",
    "Phase",
]
