"""Sampling engines driving user-supplied models."""

from .mcmc import MCMCSampler, Metropolis, SamplingStats
from .wang_landau import Phase, WangLandau
from .simple import Simple

__all__ = [
    "MCMCSampler",
    "Metropolis",
    "SamplingStats",
    "Phase",
    "WangLandau",
    "Simple",
]
