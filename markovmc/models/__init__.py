"""Reference models implementing the sampler contracts."""

from .ising import IsingModel
from .toy import DiscreteLevelModel, TwoStateModel, GaussianModel

__all__ = [
    "IsingModel",
    "DiscreteLevelModel",
    "TwoStateModel",
    "GaussianModel",
]
