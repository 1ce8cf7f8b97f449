"""Shared fixtures and helper models for the test suite."""

import numpy as np
import pytest

from markovmc.core.model import MarkovChain


class LadderModel(MarkovChain):
    """Integer energy that moves one step up or down per proposal."""

    def __init__(self, start: int = 0):
        self.energy = start
        self._previous = start

    def value(self) -> float:
        return float(self.energy)

    def propose_change(self, rng: np.random.Generator):
        self._previous = self.energy
        self.energy += 1 if rng.random() < 0.5 else -1

    def undo_last_change(self):
        self.energy = self._previous


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random stream."""
    return np.random.default_rng(12345)
