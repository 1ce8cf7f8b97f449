"""Tests for the fixed-temperature Metropolis sampler."""

import io

import pytest

from markovmc import Metropolis, MetropolisConfig, PreconditionError
from markovmc.models import IsingModel, TwoStateModel


def test_counts_every_proposal(rng):
    config = MetropolisConfig(temperature=1e10, sweep=4, t_eq=3, iterations=5)
    stats = Metropolis(TwoStateModel(0.0, 1.0), config).run(rng)

    assert stats.tries == (3 + 5) * 4
    assert 0 <= stats.rejects <= stats.tries


def test_cold_chain_rejects_uphill_moves(rng):
    model = TwoStateModel(0.0, 100.0)
    config = MetropolisConfig(temperature=1e-3, sweep=10, iterations=10)
    stats = Metropolis(model, config).run(rng)

    assert stats.rejects == stats.tries == 100
    assert model.value() == 0.0


def test_downhill_moves_are_always_accepted(rng):
    model = TwoStateModel(100.0, 0.0)
    config = MetropolisConfig(temperature=1e-3, sweep=1, iterations=1)
    stats = Metropolis(model, config).run(rng)

    assert stats.rejects == 0
    assert model.value() == 0.0


def test_retains_one_sample_per_iteration(rng):
    out = io.StringIO()
    config = MetropolisConfig(temperature=2.0, sweep=16, t_eq=10, iterations=25)
    Metropolis(IsingModel(4, rng=rng), config).run(rng, output=out)

    lines = out.getvalue().splitlines()
    assert lines[0] == "# energy magnetization"
    assert len(lines) == 1 + 25
    energy, magnetization = lines[1].split()
    float(energy)
    int(magnetization)


def test_downhill_and_uphill(rng):
    model = IsingModel(6, rng=rng)
    sampler = Metropolis(model)
    start = model.value()

    low = sampler.downhill(rng, 500)
    assert low <= start
    assert low == model.value() == model.total_energy()

    high = sampler.uphill(rng, 500)
    assert high >= low
    assert high == model.value() == model.total_energy()


@pytest.mark.parametrize("overrides", [
    dict(temperature=0.0),
    dict(sweep=0),
    dict(t_eq=-1),
    dict(iterations=0),
])
def test_invalid_configuration_is_rejected(overrides):
    with pytest.raises(PreconditionError):
        MetropolisConfig(**overrides)
