"""
Command-line interface for markovmc.

Usage:
    markovmc-run wang-landau --model ising --size 4 --low -26 --high 26 --bins 13
    markovmc-run metropolis --model ising --size 16 --temperature 2.269 --iterations 1000
    markovmc-run simple --mean 0 --std 1 --iterations 10000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np

from .config import MetropolisConfig, SimpleConfig, WangLandauConfig, load_config
from .core.model import DirectSamplable, MarkovChain
from .exceptions import MarkovMCError
from .io import open_output, write_json

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = True):
    """Setup logging configuration."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _option(args, model_config: dict, key: str, default):
    value = getattr(args, key, None)
    if value is None:
        value = model_config.get(key, default)
    return value


def build_model(
    args,
    model_config: dict,
    rng: np.random.Generator,
    contract: type,
    default: str = 'ising'
):
    """
    Instantiate the reference model selected on the command line or in the config.

    ``default`` names the model used when neither selects one.

    Raises
    ------
    ValueError
        If the model is unknown, misconfigured or does not implement
        ``contract``.
    """
    from .models import DiscreteLevelModel, GaussianModel, IsingModel

    name = args.model or model_config.get('name', default)

    if name == 'ising':
        random_start = args.random_start or model_config.get('random_start', False)
        model = IsingModel(
            _option(args, model_config, 'size', 4),
            coupling=_option(args, model_config, 'coupling', 1.0),
            rng=rng if random_start else None
        )
    elif name == 'levels':
        energies = _option(args, model_config, 'energies', None)
        degeneracies = _option(args, model_config, 'degeneracies', None)
        if not energies or not degeneracies:
            raise ValueError("The levels model needs --energies and --degeneracies")
        model = DiscreteLevelModel(energies, degeneracies)
    elif name == 'gaussian':
        model = GaussianModel(
            _option(args, model_config, 'mean', 0.0),
            _option(args, model_config, 'std', 1.0)
        )
    else:
        raise ValueError(f"Unknown model: {name}. Available: ['ising', 'levels', 'gaussian']")

    if not isinstance(model, contract):
        raise ValueError(f"Model '{name}' cannot be used here: it is not a {contract.__name__}")

    return model


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--model', '-m',
        type=str,
        choices=['ising', 'levels', 'gaussian'],
        default=None,
        help='Reference model (default: from config, else ising)'
    )
    parser.add_argument('--size', type=int, default=None, help='Ising lattice size L')
    parser.add_argument('--coupling', type=float, default=None, help='Ising coupling J')
    parser.add_argument(
        '--random-start',
        action='store_true',
        help='Start the Ising model from a random configuration'
    )
    parser.add_argument(
        '--energies',
        type=float,
        nargs='+',
        default=None,
        help='Level energies of the levels model'
    )
    parser.add_argument(
        '--degeneracies',
        type=int,
        nargs='+',
        default=None,
        help='Level degeneracies of the levels model'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output file path; a .json suffix writes a JSON summary (default: stdout)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducibility'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress progress output'
    )


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Markov-chain Monte Carlo sampling',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    wl = subparsers.add_parser(
        'wang-landau',
        help='Estimate the density of states',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_common_arguments(wl)
    wl.add_argument('--low', type=float, default=None, help='Lower window bound (excluded)')
    wl.add_argument('--high', type=float, default=None, help='Upper window bound (excluded)')
    wl.add_argument('--bins', type=int, default=None, help='Number of bins')
    wl.add_argument('--sweep', type=int, default=None, help='Proposals per sweep')
    wl.add_argument('--lnf-final', type=float, default=None, help='Final refinement parameter')
    wl.add_argument('--batch-size', type=int, default=None, help='Sweeps per flatness check')
    wl.add_argument(
        '--max-start-attempts',
        type=int,
        default=None,
        help='Give up if the window is not reached after this many proposals'
    )
    wl.add_argument('--plot', action='store_true', help='Generate summary plot')
    wl.add_argument(
        '--plot-output',
        type=str,
        default='wang_landau.png',
        help='Output path for plots'
    )

    mc = subparsers.add_parser(
        'metropolis',
        help='Sample at fixed temperature',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_common_arguments(mc)
    mc.add_argument('--temperature', '-T', type=float, default=None, help='Temperature')
    mc.add_argument('--sweep', type=int, default=None, help='Proposals per sweep')
    mc.add_argument('--t-eq', type=int, default=None, help='Equilibration sweeps')
    mc.add_argument('--iterations', '-n', type=int, default=None, help='Retained samples')

    simple = subparsers.add_parser(
        'simple',
        help='Direct sampling of independent values',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_common_arguments(simple)
    simple.add_argument('--mean', type=float, default=None, help='Gaussian mean')
    simple.add_argument('--std', type=float, default=None, help='Gaussian standard deviation')
    simple.add_argument('--iterations', '-n', type=int, default=None, help='Number of samples')

    return parser.parse_args(argv)


def _is_json(path: Optional[str]) -> bool:
    return path is not None and Path(path).suffix.lower() == '.json'


def run_wang_landau(args, config: dict, rng: np.random.Generator) -> int:
    from .sampler import WangLandau

    wl_config = WangLandauConfig.from_dict(
        config.get('wang_landau'),
        low=args.low,
        high=args.high,
        bins=args.bins,
        sweep=args.sweep,
        lnf_final=args.lnf_final,
        batch_size=args.batch_size,
        max_start_attempts=args.max_start_attempts,
    )
    model = build_model(args, config.get('model') or {}, rng, MarkovChain)

    logger.info(f"Running Wang-Landau on ({wl_config.low}, {wl_config.high}) with {wl_config.bins} bins")
    sampler = WangLandau(model, wl_config)

    if _is_json(args.output):
        stats = sampler.run(rng, progress_bar=not args.quiet)
        write_json(args.output, {
            'command': 'wang-landau',
            'tries': stats.tries,
            'rejects': stats.rejects,
            't': sampler.t,
            'emergency': sampler.emergency,
            'skipped_power_law': sampler.skipped_power_law,
            'low': sampler.g.low,
            'high': sampler.g.high,
            'density_of_states': sampler.density_of_states(),
            'parameters': vars(wl_config),
        })
    else:
        with open_output(args.output) as out:
            stats = sampler.run(rng, output=out, progress_bar=not args.quiet)

    logger.info(f"tries = {stats.tries}, rejects = {stats.rejects}")

    if args.plot:
        from .utils.visualization import create_summary_plot
        import matplotlib.pyplot as plt

        fig = create_summary_plot(sampler)
        fig.savefig(args.plot_output, dpi=150, bbox_inches='tight')
        logger.info(f"Plot saved to {args.plot_output}")
        plt.close(fig)

    return 0


def run_metropolis(args, config: dict, rng: np.random.Generator) -> int:
    from .sampler import Metropolis

    mc_config = MetropolisConfig.from_dict(
        config.get('metropolis'),
        temperature=args.temperature,
        sweep=args.sweep,
        t_eq=args.t_eq,
        iterations=args.iterations,
    )
    model = build_model(args, config.get('model') or {}, rng, MarkovChain)

    logger.info(f"Running Metropolis at T = {mc_config.temperature}")
    sampler = Metropolis(model, mc_config)

    if _is_json(args.output):
        stats = sampler.run(rng, progress_bar=not args.quiet)
        write_json(args.output, {
            'command': 'metropolis',
            'tries': stats.tries,
            'rejects': stats.rejects,
            'acceptance_rate': stats.acceptance_rate,
            'final_value': model.value(),
            'parameters': vars(mc_config),
        })
    else:
        with open_output(args.output) as out:
            stats = sampler.run(rng, output=out, progress_bar=not args.quiet)

    logger.info(f"tries = {stats.tries}, rejects = {stats.rejects}")
    return 0


def run_simple(args, config: dict, rng: np.random.Generator) -> int:
    from .sampler import Simple

    simple_config = SimpleConfig.from_dict(config.get('simple'), iterations=args.iterations)
    model = build_model(
        args, config.get('model') or {}, rng, DirectSamplable, default='gaussian'
    )

    if _is_json(args.output):
        mean, variance = Simple(model, simple_config).run(rng, progress_bar=not args.quiet)
        write_json(args.output, {
            'command': 'simple',
            'mean': mean,
            'variance': variance,
            'parameters': vars(simple_config),
        })
    else:
        with open_output(args.output) as out:
            mean, variance = Simple(model, simple_config).run(
                rng, output=out, progress_bar=not args.quiet
            )

    logger.info(f"mean = {mean}, variance = {variance}")
    return 0


COMMANDS = {
    'wang-landau': run_wang_landau,
    'metropolis': run_metropolis,
    'simple': run_simple,
}


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(verbose=not args.quiet)

    rng = np.random.default_rng(args.seed)

    try:
        config = load_config(args.config) if args.config else {}
        return COMMANDS[args.command](args, config, rng)
    except (MarkovMCError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
