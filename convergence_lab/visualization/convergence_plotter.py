"""
Convergence Plotter
===================

This module renders the read-only snapshots produced by the simulation
controllers.

Plots included:
1. Running mean versus trial index (Law of Large Numbers)
2. Density histogram of sample means with its normal overlay (CLT)
3. Standard error and fit error across an n sweep (CLT animation)

The plotter only reads snapshots. It never calls back into a controller.
"""

from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..simulation.lln_controller import LLNSnapshot
from ..simulation.clt_controller import CLTSnapshot


class ConvergencePlotter:
    """
    Plotting utilities for LLN and CLT snapshots.

    All methods are static. Each accepts an optional Axes so the
    interactive explorer can redraw into an existing figure; when no
    Axes is given a new figure is created.
    """

    DEFAULT_SINGLE_PLOT_SIZE: Tuple[int, int] = (12, 6)

    RUNNING_MEAN_COLOR: str = "#3b82f6"
    EXPECTED_VALUE_COLOR: str = "#f59e0b"
    HISTOGRAM_COLOR: str = "#8b5cf6"
    NORMAL_CURVE_COLOR: str = "#f43f5e"
    MEAN_MARKER_COLOR: str = "#fbbf24"

    @staticmethod
    def _resolve_axes(ax: Optional[Axes]) -> Tuple[Figure, Axes]:
        if ax is None:
            fig, ax = plt.subplots(figsize=ConvergencePlotter.DEFAULT_SINGLE_PLOT_SIZE)
            return fig, ax
        ax.clear()
        return ax.figure, ax

    @staticmethod
    def _save(fig: Figure, save_path: Optional[str]) -> None:
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Figure saved to:  {save_path}")

    @staticmethod
    def plot_running_mean(
        snapshot: LLNSnapshot,
        ax: Optional[Axes] = None,
        save_path: Optional[str] = None
    ) -> Figure:
        """
        Plot the running mean against the number of trials.

        The y-range is fixed per distribution so the line visibly
        settles onto the dashed expected-value reference.

        Args:
            snapshot: LLN state to draw.
            ax: Existing axes to draw into (cleared first).
            save_path: If provided, save figure to this path.

        Returns:
            The Figure containing the plot.
        """
        fig, ax = ConvergencePlotter._resolve_axes(ax)

        trial_indices = [point.trial_index for point in snapshot.series]
        running_means = [point.running_mean for point in snapshot.series]

        ax.plot(
            trial_indices, running_means,
            color=ConvergencePlotter.RUNNING_MEAN_COLOR,
            linewidth=2, label='Running Mean'
        )
        ax.axhline(
            y=snapshot.expected_mean,
            color=ConvergencePlotter.EXPECTED_VALUE_COLOR,
            linestyle='--', linewidth=1.5,
            label=f'Expected Value ({snapshot.expected_mean:.2f})'
        )

        ax.set_ylim(*snapshot.axis_range)
        if trial_indices:
            ax.set_xlim(trial_indices[0], max(trial_indices[-1], trial_indices[0] + 1))

        ax.set_xlabel('Number of Trials (n)', fontsize=10)
        ax.set_ylabel('Average Value', fontsize=10)
        ax.set_title(
            f'Convergence of Sample Mean: {snapshot.distribution.value}\n'
            f'n = {snapshot.sample_count}, mean = {snapshot.running_mean:.4f}',
            fontsize=11
        )
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper right', fontsize=9)

        ConvergencePlotter._save(fig, save_path)
        return fig

    @staticmethod
    def plot_sampling_distribution(
        snapshot: CLTSnapshot,
        ax: Optional[Axes] = None,
        save_path: Optional[str] = None
    ) -> Figure:
        """
        Plot the density histogram of sample means and the normal curve.

        Bars have area equal to relative frequency, so they are directly
        comparable with the overlaid Normal(mu, sigma / sqrt(n)) density.
        Both axes stay fixed for the whole animation.

        Args:
            snapshot: CLT state to draw.
            ax: Existing axes to draw into (cleared first).
            save_path: If provided, save figure to this path.

        Returns:
            The Figure containing the plot.
        """
        fig, ax = ConvergencePlotter._resolve_axes(ax)

        starts = np.array([b.range_start for b in snapshot.bins])
        widths = np.array([b.width for b in snapshot.bins])
        densities = np.array([b.density for b in snapshot.bins])
        midpoints = np.array([b.midpoint for b in snapshot.bins])
        normal_curve = np.array([b.theoretical_density for b in snapshot.bins])

        ax.bar(
            starts, densities, width=widths, align='edge',
            color=ConvergencePlotter.HISTOGRAM_COLOR, alpha=0.6,
            label='Simulated Density'
        )
        ax.plot(
            midpoints, normal_curve,
            color=ConvergencePlotter.NORMAL_CURVE_COLOR, linewidth=3,
            label='Normal Approximation'
        )
        ax.axvline(
            x=snapshot.theoretical_mean,
            color=ConvergencePlotter.MEAN_MARKER_COLOR,
            linestyle='--', linewidth=1.5
        )

        ax.set_xlim(*snapshot.x_domain)
        ax.set_ylim(*snapshot.y_domain)

        ax.set_xlabel('Sample Mean', fontsize=10)
        ax.set_ylabel('Density', fontsize=10)
        ax.set_title(
            f'Distribution of Sample Means: {snapshot.distribution.value}\n'
            f'n = {snapshot.sample_size}, M = {snapshot.total_simulations}, '
            f'SE = {snapshot.standard_error:.4f}',
            fontsize=11
        )
        ax.grid(True, alpha=0.3, axis='y')
        ax.legend(loc='upper right', fontsize=9)

        ConvergencePlotter._save(fig, save_path)
        return fig

    @staticmethod
    def plot_convergence_sweep(
        history: Sequence[CLTSnapshot],
        save_path: Optional[str] = None
    ) -> Figure:
        """
        Plot standard error and histogram fit error against n.

        Args:
            history: Snapshots from CLTController.run_animation().
            save_path: If provided, save figure to this path.

        Returns:
            The Figure containing both subplots.
        """
        sample_sizes = [s.sample_size for s in history]
        standard_errors = [s.standard_error for s in history]
        fit_errors = [s.fit_error for s in history]

        fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

        # ===== SUBPLOT 1: Standard Error =====
        axes[0].plot(sample_sizes, standard_errors, 'o-', color='#ec4899', linewidth=1.5)
        axes[0].set_ylabel('Standard Error', fontsize=10)
        axes[0].set_title('Standard Error (sigma / sqrt(n))', fontsize=11)
        axes[0].grid(True, alpha=0.3)

        # ===== SUBPLOT 2: Fit Error =====
        axes[1].plot(sample_sizes, fit_errors, 's-', color='#10b981', linewidth=1.5)
        axes[1].set_xlabel('Sample Size (n)', fontsize=10)
        axes[1].set_ylabel('L1 Distance', fontsize=10)
        axes[1].set_title('Histogram vs Normal Approximation', fontsize=11)
        axes[1].grid(True, alpha=0.3)

        if history:
            fig.suptitle(
                f'CLT Convergence: {history[0].distribution.value}',
                fontsize=14, fontweight='bold'
            )
        fig.tight_layout()

        ConvergencePlotter._save(fig, save_path)
        return fig
