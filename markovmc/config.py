"""
Run configuration for the sampling engines.

Each engine takes one immutable configuration object. Values are validated
when the object is built, so a bad parameter fails before any sampling work
starts. Configurations can also be read from YAML files.
"""

from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union
import logging

import yaml

from .exceptions import PreconditionError

logger = logging.getLogger(__name__)


class _FromDict:
    """Mixin building a frozen dataclass from a plain mapping."""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], **overrides):
        """
        Build a configuration from a mapping, e.g. one YAML section.

        Parameters
        ----------
        data : Mapping, optional
            Configuration values keyed by field name.
        **overrides
            Values taking precedence over ``data``. None values are skipped,
            which lets unset command-line flags fall through.

        Raises
        ------
        PreconditionError
            On unknown keys or invalid values.
        """
        values = dict(data or {})
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise PreconditionError(
                f"Unknown {cls.__name__} keys: {unknown}. "
                f"Available: {sorted(known)}"
            )

        missing = sorted(
            f.name for f in fields(cls)
            if f.name not in values and f.default is MISSING
        )
        if missing:
            raise PreconditionError(f"Missing {cls.__name__} keys: {missing}")

        return cls(**values)


@dataclass(frozen=True)
class WangLandauConfig(_FromDict):
    """
    Parameters of one Wang-Landau estimate.

    Attributes
    ----------
    low : float
        Lower bound of the energy window (excluded).
    high : float
        Upper bound of the energy window (excluded).
    bins : int
        Number of histogram bins.
    sweep : int
        Proposals per outer step.
    lnf_final : float
        Final refinement parameter; the power-law phase stops below it.
    batch_size : int
        Outer steps per flatness check in the halving phase.
    max_start_attempts : int, optional
        Proposal budget for bringing the chain into the window. None means
        unbounded.
    """
    low: float
    high: float
    bins: int = 100
    sweep: int = 1
    lnf_final: float = 1e-5
    batch_size: int = 1000
    max_start_attempts: Optional[int] = None

    def __post_init__(self):
        if not self.low < self.high:
            raise PreconditionError(f"low must be smaller than high, got ({self.low}, {self.high})")
        if self.bins < 1:
            raise PreconditionError(f"bins must be positive, got {self.bins}")
        if self.sweep < 1:
            raise PreconditionError(f"sweep must be positive, got {self.sweep}")
        if not self.lnf_final > 0:
            raise PreconditionError(f"lnf_final must be positive, got {self.lnf_final}")
        if self.batch_size < 1:
            raise PreconditionError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_start_attempts is not None and self.max_start_attempts < 1:
            raise PreconditionError(
                f"max_start_attempts must be positive or None, got {self.max_start_attempts}"
            )


@dataclass(frozen=True)
class MetropolisConfig(_FromDict):
    """
    Parameters of one Metropolis run.

    The total number of proposals is ``(t_eq + iterations) * sweep``.
    """
    temperature: float = 1e10
    sweep: int = 1
    t_eq: int = 0
    iterations: int = 1

    def __post_init__(self):
        if not self.temperature > 0:
            raise PreconditionError(f"temperature must be positive, got {self.temperature}")
        if self.sweep < 1:
            raise PreconditionError(f"sweep must be positive, got {self.sweep}")
        if self.t_eq < 0:
            raise PreconditionError(f"t_eq must not be negative, got {self.t_eq}")
        if self.iterations < 1:
            raise PreconditionError(f"iterations must be positive, got {self.iterations}")


@dataclass(frozen=True)
class SimpleConfig(_FromDict):
    """Number of independent samples drawn by direct sampling."""
    iterations: int = 1

    def __post_init__(self):
        if self.iterations < 1:
            raise PreconditionError(f"iterations must be positive, got {self.iterations}")


def load_config(config_path: Union[str, Path]) -> dict:
    """
    Load a configuration file.

    The file holds one optional section per engine (``wang_landau``,
    ``metropolis``, ``simple``) plus a ``model`` section describing the
    reference model.

    Parameters
    ----------
    config_path : str or Path
        Path to a YAML file.

    Returns
    -------
    dict
        Parsed sections. Empty for an empty file.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise PreconditionError(f"Config file {config_path} must hold a mapping at top level")

    logger.debug(f"Loaded config sections {sorted(config)} from {config_path}")
    return config
