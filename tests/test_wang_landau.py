"""Tests for the Wang-Landau density-of-states estimator."""

import io
import logging

import numpy as np
import pytest

from markovmc import (
    PreconditionError,
    WangLandau,
    WangLandauConfig,
    WindowNotReachedError,
)
from markovmc.models import DiscreteLevelModel, TwoStateModel
from markovmc.sampler import Phase

from conftest import LadderModel


def _config(**overrides) -> WangLandauConfig:
    """Small two-bin window over (0, 1) that converges in a few thousand steps."""
    values = dict(low=0.0, high=1.0, bins=2, sweep=1, lnf_final=1e-4, batch_size=100)
    values.update(overrides)
    return WangLandauConfig(**values)


def test_two_state_model_converges_to_flat_density(rng):
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config())
    tries, rejects = sampler.run(rng)

    assert sampler.phase is Phase.DONE
    assert not sampler.emergency
    assert not sampler.skipped_power_law

    dos = sampler.density_of_states()
    assert [c for c, _ in dos] == pytest.approx([0.25, 0.75])
    assert all(value > 0 for _, value in dos)
    assert dos[1][1] - dos[0][1] == pytest.approx(0.0, abs=0.1)

    assert tries >= rejects >= 0


def test_schedule_of_two_state_run(rng):
    # halving ends at t = 1000 with lnf = 2**-10 <= 1/t, the power-law
    # phase runs until 1/t reaches 1e-4, entropic sampling takes twice as long
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config())
    stats = sampler.run(rng)

    assert sampler.t == 10001
    assert sampler.lnf == pytest.approx(1e-4)
    assert stats.tries == 3 * sampler.t


def test_tries_scale_with_sweep(rng):
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config(sweep=3, lnf_final=1e-3))
    stats = sampler.run(rng)

    assert stats.tries == 3 * sampler.t * 3


def test_degenerate_levels_recover_log_degeneracy(rng):
    model = DiscreteLevelModel([0.25, 0.75], [1, 3])
    sampler = WangLandau(model, _config())
    sampler.run(rng)

    (_, ln_g0), (_, ln_g1) = sampler.density_of_states()
    exact = model.log_density_of_states()

    assert ln_g1 - ln_g0 == pytest.approx(exact[0.75] - exact[0.25], abs=0.15)


def test_g_and_h_share_binning(rng):
    sampler = WangLandau(DiscreteLevelModel([0.1, 0.5, 0.9], [2, 1, 2]), _config(bins=3))
    sampler.run(rng)

    assert sampler.g.bounds() == sampler.h.bounds()
    assert sampler.g.bins == sampler.h.bins == 3
    assert sampler.h.total() == pytest.approx(2 * sampler.t)


def test_out_of_window_proposals_are_rejected(rng):
    model = TwoStateModel(0.5, 5.0)
    sampler = WangLandau(model, _config(bins=1, lnf_final=1e-3))
    stats = sampler.run(rng)

    assert stats.rejects == stats.tries
    assert stats.acceptance_rate == 0.0
    assert model.value() == 0.5


def test_emergency_trim_narrows_window(rng, caplog):
    # the bin (2, 3) can never be visited, so the halving phase cannot finish
    model = DiscreteLevelModel([0.5, 1.5], [1, 1])
    config = WangLandauConfig(low=0.0, high=3.0, bins=3, sweep=1, lnf_final=1e-2, batch_size=100)
    sampler = WangLandau(model, config)

    with caplog.at_level(logging.WARNING, logger="markovmc.sampler.wang_landau"):
        stats = sampler.run(rng)

    assert sampler.emergency
    assert not sampler.skipped_power_law
    assert sampler.lnf == config.lnf_final
    assert sampler.g.bins == sampler.h.bins == 2
    assert sampler.g.bounds() == sampler.h.bounds() == (0.0, 2.0)
    assert len(sampler.density_of_states()) == 2
    assert stats.tries == 3 * sampler.t == 300
    assert "trimming the histogram" in caplog.text


def test_skipped_power_law_is_reported(rng, caplog):
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config(lnf_final=1e-3))

    with caplog.at_level(logging.WARNING, logger="markovmc.sampler.wang_landau"):
        stats = sampler.run(rng)

    assert sampler.skipped_power_law
    assert not sampler.emergency
    assert sampler.t == 1000
    assert stats.tries == 3000
    assert "phase 2 will not be performed" in caplog.text


def test_output_lists_centers_and_values(rng):
    out = io.StringIO()
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config(lnf_final=1e-3))
    sampler.run(rng, output=out)

    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    parsed = [tuple(float(x) for x in line.split()) for line in lines]
    np.testing.assert_allclose(parsed, sampler.density_of_states())


def test_find_start_walks_into_window(rng):
    model = LadderModel(start=12)
    sampler = WangLandau(model, WangLandauConfig(low=-3.0, high=3.0))

    attempts = sampler.find_start(rng)

    assert attempts >= 10
    assert -3.0 < model.value() < 3.0


def test_find_start_from_below(rng):
    model = LadderModel(start=-20)
    sampler = WangLandau(model, WangLandauConfig(low=-3.0, high=3.0, max_start_attempts=10000))
    sampler.find_start(rng)

    assert -3.0 < model.value() < 3.0


def test_find_start_gives_up_after_budget(rng):
    model = TwoStateModel(10.0, 11.0)
    sampler = WangLandau(model, WangLandauConfig(low=0.0, high=5.0, max_start_attempts=50))

    with pytest.raises(WindowNotReachedError) as excinfo:
        sampler.run(rng)

    assert excinfo.value.attempts == 50
    assert model.value() == 10.0


def test_run_is_single_use(rng):
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config(lnf_final=1e-3))
    sampler.run(rng)

    with pytest.raises(PreconditionError, match="only be called once"):
        sampler.run(rng)


@pytest.mark.parametrize("overrides", [
    dict(low=1.0, high=1.0),
    dict(sweep=0),
    dict(lnf_final=0.0),
    dict(lnf_final=-1e-3),
    dict(bins=0),
    dict(batch_size=0),
    dict(max_start_attempts=0),
])
def test_invalid_configuration_is_rejected(overrides):
    with pytest.raises(PreconditionError):
        _config(**overrides)


def test_emergency_trim_keeps_levels_on_bin_borders(rng):
    # integer levels sit on the left borders of bins (1, 2) and (2, 3)
    model = DiscreteLevelModel([1.0, 2.0], [1, 1])
    config = WangLandauConfig(low=0.0, high=4.0, bins=4, sweep=1, lnf_final=1e-2, batch_size=100)
    sampler = WangLandau(model, config)

    stats = sampler.run(rng)

    assert sampler.emergency
    assert sampler.g.bounds() == sampler.h.bounds() == (1.0, 3.0)
    assert sampler.g.at(1.0) is not None
    assert all(visits > 0 for visits in sampler.h.data())
    assert sampler.h.total() == 2 * sampler.t
    assert stats.tries == 3 * sampler.t


def test_power_law_phase_accepts_subnormal_lnf_final(rng):
    sampler = WangLandau(TwoStateModel(0.25, 0.75), _config(lnf_final=5e-324))
    sampler._t = 10
    sampler._lnf = 0.0

    sampler._run_power_law(rng, progress_bar=True)

    assert sampler.t == 10
    assert sampler.stats.tries == 0
