#!/usr/bin/env python
"""
Demo script showing how to use markovmc.

Estimates the density of states of the 4 × 4 Ising model with Wang-Landau
sampling, compares it with the exact values and derives the specific heat.
"""

import logging

import numpy as np

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Exact density of states of the periodic 4 × 4 Ising model
EXACT_DOS_4x4 = {
    -32: 2, -24: 32, -20: 64, -16: 424, -12: 1728, -8: 6688, -4: 13568,
    0: 20524, 4: 13568, 8: 6688, 12: 1728, 16: 424, 20: 64, 24: 32, 32: 2,
}


def main():
    """Run demo."""
    from markovmc import WangLandau, WangLandauConfig, Metropolis, MetropolisConfig
    from markovmc.analysis import canonical_averages, normalize_log_dos
    from markovmc.models import IsingModel

    rng = np.random.default_rng(42)

    # =========================================================================
    # Step 1: Wang-Landau estimate of ln g(E)
    # =========================================================================
    logger.info("Step 1: Running Wang-Landau sampling...")

    # one bin per energy level from -24 to 24; the ground states at -32
    # and +32 lie outside the open window
    config = WangLandauConfig(low=-26, high=26, bins=13, sweep=16, lnf_final=1e-5)
    sampler = WangLandau(IsingModel(4), config)
    stats = sampler.run(rng, progress_bar=True)

    logger.info(f"Proposals: {stats.tries}, acceptance rate: {stats.acceptance_rate:.2%}")

    # =========================================================================
    # Step 2: Compare with the exact result
    # =========================================================================
    logger.info("Step 2: Comparing with the exact density of states...")

    energies = sampler.g.centers()
    estimate = normalize_log_dos(sampler.g.data())
    exact = normalize_log_dos([np.log(EXACT_DOS_4x4[int(round(e))]) for e in energies])

    print("\n" + "=" * 60)
    print(f"{'E':>6} {'ln g (WL)':>12} {'ln g (exact)':>14} {'error':>10}")
    for e, est, ex in zip(energies, estimate, exact):
        print(f"{e:>6.0f} {est:>12.4f} {ex:>14.4f} {est - ex:>10.4f}")
    print("=" * 60)

    # =========================================================================
    # Step 3: Thermodynamics
    # =========================================================================
    logger.info("Step 3: Computing canonical averages...")

    temperatures = np.linspace(1.0, 5.0, 9)
    thermo = canonical_averages(energies, sampler.g.data(), temperatures)
    for T, u, c in zip(thermo.temperatures, thermo.internal_energy, thermo.specific_heat):
        print(f"T = {T:.2f}: <E> = {u:8.3f}, C = {c:8.3f}")

    # =========================================================================
    # Step 4: Cross-check with Metropolis at one temperature
    # =========================================================================
    logger.info("Step 4: Cross-checking with Metropolis sampling at T = 3.0...")

    model = IsingModel(4, rng=rng)
    metropolis = Metropolis(model, MetropolisConfig(temperature=3.0, sweep=16, t_eq=200, iterations=1))
    metropolis.run(rng)
    logger.info(f"Energy after equilibration at T = 3.0: {model.value()}")

    # =========================================================================
    # Step 5: Plot
    # =========================================================================
    try:
        import matplotlib.pyplot as plt
        from markovmc.utils import create_summary_plot

        fig = create_summary_plot(sampler, temperatures=np.linspace(0.5, 6.0, 200))
        fig.savefig('wang_landau_demo.png', dpi=150, bbox_inches='tight')
        plt.close(fig)
        logger.info("Saved plot to wang_landau_demo.png")
    except ImportError:
        logger.info("matplotlib not available, skipping plots")

    logger.info("Demo complete!")


if __name__ == "__main__":
    main()
