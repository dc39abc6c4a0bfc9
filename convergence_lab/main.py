"""
Convergence Lab - Main Entry Point
==================================

This is the main entry point for the convergence lab.

Commands:
    lln      Run the Law of Large Numbers simulation headlessly
    clt      Recompute one CLT histogram, or sweep n from min to max
    explore  Open the interactive two-panel window
    explain  Ask the advisory model to comment on a CLT setting

Usage:
    convergence-lab lln --distribution bernoulli --trials 1000
    convergence-lab clt --distribution dice --sample-size 10 --plot
    convergence-lab clt --distribution exponential --sweep --save sweep.png
    convergence-lab explore

Or import and use programmatically:
    from convergence_lab.main import run_lln_simulation, run_clt_simulation
"""

import argparse
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from .distributions.distribution_library import Distribution
from .distributions.random_source import NumpyRandomSource
from .simulation.lln_controller import LLNController, LLNSnapshot
from .simulation.clt_controller import CLTController, CLTConfiguration, CLTSnapshot
from .visualization.convergence_plotter import ConvergencePlotter
from .explanation.explanation_service import (
    ExplanationRequest,
    ExplanationService,
    GeminiExplanationClient,
    ERROR_MESSAGE
)


# ============================================================================
# SIMULATION FUNCTIONS
# ============================================================================

def run_lln_simulation(
    distribution: Distribution = Distribution.BERNOULLI,
    number_of_trials: int = 1000,
    seed: Optional[int] = None,
    plot_results: bool = False,
    save_path: Optional[str] = None,
    verbose: bool = True
) -> LLNSnapshot:
    """
    Draw `number_of_trials` samples through the LLN controller.

    Args:
        distribution: Distribution to sample.
        number_of_trials: Samples to draw (at least 1).
        seed: Seed for reproducible runs.
        plot_results: If True, show the running-mean chart.
        save_path: If provided, save the chart to this path.
        verbose: If True, print the summary.

    Returns:
        The final LLNSnapshot.
    """
    if number_of_trials < 1:
        raise ValueError(f"Number of trials must be at least 1. Received: {number_of_trials}")

    controller = LLNController(
        distribution, random_source=NumpyRandomSource(seed), verbose=verbose
    )
    snapshot: LLNSnapshot = controller.run_trials(number_of_trials)

    if verbose:
        snapshot.print_summary()

    if plot_results or save_path:
        ConvergencePlotter.plot_running_mean(snapshot, save_path=save_path)
        if plot_results:
            plt.show()

    return snapshot


def run_clt_simulation(
    distribution: Distribution = Distribution.UNIFORM,
    sample_size: int = 1,
    total_simulations: int = 2000,
    seed: Optional[int] = None,
    plot_results: bool = False,
    save_path: Optional[str] = None,
    verbose: bool = True
) -> CLTSnapshot:
    """
    Recompute the CLT histogram for one sample size.

    Args:
        distribution: Distribution to sample.
        sample_size: n (within the configured slider range).
        total_simulations: M.
        seed: Seed for reproducible runs.
        plot_results: If True, show the histogram.
        save_path: If provided, save the histogram to this path.
        verbose: If True, print the summary.

    Returns:
        The CLTSnapshot for n.
    """
    controller = CLTController(
        distribution,
        configuration=CLTConfiguration(total_simulations=total_simulations),
        random_source=NumpyRandomSource(seed)
    )
    snapshot: CLTSnapshot = controller.set_sample_size(sample_size)

    if verbose:
        snapshot.print_summary()

    if plot_results or save_path:
        ConvergencePlotter.plot_sampling_distribution(snapshot, save_path=save_path)
        if plot_results:
            plt.show()

    return snapshot


def run_clt_sweep(
    distribution: Distribution = Distribution.UNIFORM,
    total_simulations: int = 2000,
    seed: Optional[int] = None,
    plot_results: bool = False,
    save_path: Optional[str] = None,
    verbose: bool = True
) -> List[CLTSnapshot]:
    """
    Run the stepping animation headlessly from the minimum to the maximum n.

    Returns:
        One snapshot per step.
    """
    controller = CLTController(
        distribution,
        configuration=CLTConfiguration(total_simulations=total_simulations),
        random_source=NumpyRandomSource(seed),
        verbose=verbose
    )
    history: List[CLTSnapshot] = controller.run_animation()

    if verbose:
        print("\n" + "-" * 60)
        print(f"{'n':>4}  {'mean of means':>14}  {'SE':>8}  {'fit error':>10}")
        print("-" * 60)
        for snapshot in history:
            print(f"{snapshot.sample_size:>4}  {snapshot.mean_of_sample_means:>14.4f}  "
                  f"{snapshot.standard_error:>8.4f}  {snapshot.fit_error:>10.4f}")
        history[-1].print_summary()

    if plot_results or save_path:
        ConvergencePlotter.plot_convergence_sweep(history, save_path=save_path)
        if plot_results:
            plt.show()

    return history


def run_explanation(
    distribution: Distribution,
    sample_size: int,
    total_simulations: int
) -> str:
    """Fetch advisory text. Always returns a printable string."""
    try:
        client = GeminiExplanationClient()
    except Exception as error:
        print(f"ERROR: Explanation client unavailable: {error}")
        return ERROR_MESSAGE

    service = ExplanationService(client)
    return service.explain(ExplanationRequest(distribution, sample_size, total_simulations))


# ============================================================================
# COMMAND LINE
# ============================================================================

def _distribution_argument(text: str) -> Distribution:
    try:
        return Distribution.from_name(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error))


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog='convergence-lab',
        description='Law of Large Numbers and Central Limit Theorem simulations'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # ===== lln =====
    lln_parser = subparsers.add_parser('lln', help='Running mean of independent draws')
    lln_parser.add_argument('--distribution', type=_distribution_argument,
                            default=Distribution.BERNOULLI,
                            help='bernoulli, uniform, exponential or dice (default: bernoulli)')
    lln_parser.add_argument('--trials', type=int, default=1000,
                            help='Number of samples to draw (default: 1000)')
    lln_parser.add_argument('--seed', type=int, default=None, help='Random seed')
    lln_parser.add_argument('--plot', action='store_true', help='Show the chart')
    lln_parser.add_argument('--save', type=str, default=None, help='Save the chart to this path')

    # ===== clt =====
    clt_parser = subparsers.add_parser('clt', help='Distribution of sample means')
    clt_parser.add_argument('--distribution', type=_distribution_argument,
                            default=Distribution.UNIFORM,
                            help='bernoulli, uniform, exponential or dice (default: uniform)')
    clt_parser.add_argument('--sample-size', type=int, default=1,
                            help='Sample size n, 1 to 50 (default: 1)')
    clt_parser.add_argument('--simulations', type=int, default=2000,
                            help='Number of sample means M (default: 2000)')
    clt_parser.add_argument('--sweep', action='store_true',
                            help='Step n from 1 to 50 instead of a single recompute')
    clt_parser.add_argument('--seed', type=int, default=None, help='Random seed')
    clt_parser.add_argument('--plot', action='store_true', help='Show the chart')
    clt_parser.add_argument('--save', type=str, default=None, help='Save the chart to this path')

    # ===== explore =====
    subparsers.add_parser('explore', help='Open the interactive window')

    # ===== explain =====
    explain_parser = subparsers.add_parser('explain', help='Commentary on a CLT setting')
    explain_parser.add_argument('--distribution', type=_distribution_argument,
                                default=Distribution.UNIFORM)
    explain_parser.add_argument('--sample-size', type=int, default=1)
    explain_parser.add_argument('--simulations', type=int, default=2000)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the selected command."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == 'lln':
            run_lln_simulation(
                distribution=args.distribution,
                number_of_trials=args.trials,
                seed=args.seed,
                plot_results=args.plot,
                save_path=args.save
            )
        elif args.command == 'clt':
            if args.sweep:
                run_clt_sweep(
                    distribution=args.distribution,
                    total_simulations=args.simulations,
                    seed=args.seed,
                    plot_results=args.plot,
                    save_path=args.save
                )
            else:
                run_clt_simulation(
                    distribution=args.distribution,
                    sample_size=args.sample_size,
                    total_simulations=args.simulations,
                    seed=args.seed,
                    plot_results=args.plot,
                    save_path=args.save
                )
        elif args.command == 'explore':
            from .visualization.interactive_explorer import InteractiveExplorer
            InteractiveExplorer().show()
        elif args.command == 'explain':
            print(run_explanation(args.distribution, args.sample_size, args.simulations))
    except ValueError as error:
        print(f"ERROR: {error}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
