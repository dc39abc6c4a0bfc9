"""
Central Limit Theorem Controller
================================

This module drives the CLT view: for the current sample size n it
re-simulates M sample means, bins them into a density histogram over a
fixed domain and overlays Normal(mu, sigma / sqrt(n)).

State machine (stepping animation):

    Idle ----start----> Stepping ----pause / slider / reset----> Idle
                           |
                           +---- tick at n == max_sample_size ---> Idle

- start at n == max_sample_size first rewinds n to min_sample_size.
- Every tick advances n by one and recomputes the full histogram.
- Changing the distribution or resetting always returns n to the
  minimum and recomputes.

Like the LLN controller, this class owns no timer. The caller drives
`tick()` every `step_interval_ms`; stopping the timer is the only
cancellation needed because a recompute is never partial.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from ..distributions.distribution_library import (
    Distribution,
    theoretical_mean,
    theoretical_std_dev,
    display_domain
)
from ..distributions.random_source import AbstractRandomSource, NumpyRandomSource
from ..metrics.convergence_metrics import (
    compute_standard_error,
    compute_absolute_error,
    compute_histogram_area,
    compute_histogram_fit_error,
    compute_normality_statistic
)
from .sampling_distribution import (
    HistogramBin,
    SamplingDistributionResult,
    recompute,
    y_axis_domain
)


class CLTState(Enum):
    """States of the CLT stepping animation."""

    IDLE = "Idle"
    STEPPING = "Stepping"


@dataclass
class CLTConfiguration:
    """
    Parameters of the CLT simulation.

    Attributes:
        total_simulations: M, sample means drawn per recompute (fixed per session).
        min_sample_size: Smallest n (slider minimum, reset target).
        max_sample_size: Largest n (slider maximum, animation end).
        bin_count: Number of histogram bins.
        step_interval_ms: Time between animation steps.
        y_axis_headroom: Factor applied to the peak density for the axis ceiling.
    """
    total_simulations: int = 2000
    min_sample_size: int = 1
    max_sample_size: int = 50
    bin_count: int = 50
    step_interval_ms: int = 400
    y_axis_headroom: float = 1.15

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        if self.total_simulations < 1:
            raise ValueError(
                f"Number of simulations must be at least 1. "
                f"Received: {self.total_simulations}"
            )

        if not 1 <= self.min_sample_size <= self.max_sample_size:
            raise ValueError(
                f"Sample size range must satisfy 1 <= min <= max. "
                f"Received: [{self.min_sample_size}, {self.max_sample_size}]"
            )

        if self.bin_count < 1:
            raise ValueError(f"Bin count must be at least 1. Received: {self.bin_count}")

        if self.step_interval_ms < 1:
            raise ValueError(
                f"Step interval must be at least 1 ms. "
                f"Received: {self.step_interval_ms}"
            )

        if self.y_axis_headroom < 1.0:
            raise ValueError(
                f"Axis headroom must be at least 1. Received: {self.y_axis_headroom}"
            )

        # Each recompute costs O(M * n) draws
        if self.total_simulations * self.max_sample_size > 5_000_000:
            print(
                f"WARNING: {self.total_simulations} simulations at n = "
                f"{self.max_sample_size} draw {self.total_simulations * self.max_sample_size:,} "
                f"values per step. The animation may stutter."
            )

        if self.total_simulations < 10 * self.bin_count:
            print(
                f"WARNING: {self.total_simulations} simulations over "
                f"{self.bin_count} bins will give a noisy histogram."
            )

    def get_summary_dict(self) -> Dict[str, Any]:
        """Return a dictionary summary of the configuration."""
        return {
            "total_simulations": self.total_simulations,
            "min_sample_size": self.min_sample_size,
            "max_sample_size": self.max_sample_size,
            "bin_count": self.bin_count,
            "step_interval_ms": self.step_interval_ms,
            "y_axis_headroom": self.y_axis_headroom
        }


@dataclass(frozen=True)
class CLTSnapshot:
    """
    Immutable view of the CLT controller for the presentation layer.

    Attributes:
        state: Current animation state.
        distribution: Distribution sampled.
        sample_size: Current n.
        max_sample_size: Largest n of the animation.
        total_simulations: M.
        bins: Density histogram for the current n.
        mean_of_sample_means: Average of the M sample means.
        theoretical_mean: Population mean (reference marker).
        standard_error: sigma / sqrt(n).
        x_domain: Fixed histogram domain.
        y_domain: Fixed density axis (0, ceiling) for the whole run.
        dropped_count: Sample means outside x_domain.
        sample_means: The raw M sample means (read-only).
    """
    state: CLTState
    distribution: Distribution
    sample_size: int
    max_sample_size: int
    total_simulations: int
    bins: Tuple[HistogramBin, ...]
    mean_of_sample_means: float
    theoretical_mean: float
    standard_error: float
    x_domain: Tuple[float, float]
    y_domain: Tuple[float, float]
    dropped_count: int
    sample_means: np.ndarray

    @property
    def is_complete(self) -> bool:
        return self.sample_size >= self.max_sample_size

    @property
    def histogram_area(self) -> float:
        return compute_histogram_area(self.bins)

    @property
    def fit_error(self) -> float:
        return compute_histogram_fit_error(self.bins)

    def print_summary(self) -> None:
        """Print a formatted summary of the current histogram."""
        print("\n" + "=" * 60)
        print("CENTRAL LIMIT THEOREM")
        print("=" * 60)
        print(f"  Distribution:            {self.distribution.value}")
        print(f"  State:                   {self.state.value}")
        print(f"  Sample Size (n):         {self.sample_size} / {self.max_sample_size}")
        print(f"  Simulations (M):         {self.total_simulations}")
        print(f"  Mean of Sample Means:    {self.mean_of_sample_means:.4f}")
        print(f"  Theoretical Mean:        {self.theoretical_mean:.4f}")
        print(f"  Standard Error (s/√n):   {self.standard_error:.4f}")

        print("\n--- Histogram ---")
        print(f"  Domain:                  [{self.x_domain[0]}, {self.x_domain[1]}]")
        print(f"  Bins:                    {len(self.bins)}")
        print(f"  Area:                    {self.histogram_area:.4f}")
        print(f"  Fit Error (L1):          {self.fit_error:.4f}")
        if self.dropped_count > 0:
            print(f"  Outside Domain:          {self.dropped_count} "
                  f"({self.dropped_count / self.total_simulations * 100:.1f}%)")

        print("=" * 60)

    def get_metrics_dict(self) -> Dict[str, Any]:
        """Return the histogram statistics as a dictionary."""
        normality: Dict[str, float] = compute_normality_statistic(
            self.sample_means, self.theoretical_mean, self.standard_error
        )
        return {
            "distribution": self.distribution.name.lower(),
            "state": self.state.value,
            "sample_size": self.sample_size,
            "total_simulations": self.total_simulations,
            "mean_of_sample_means": self.mean_of_sample_means,
            "theoretical_mean": self.theoretical_mean,
            "absolute_error": compute_absolute_error(
                self.mean_of_sample_means, self.theoretical_mean
            ),
            "standard_error": self.standard_error,
            "histogram_area": self.histogram_area,
            "fit_error": self.fit_error,
            "ks_statistic": normality["ks_statistic"],
            "ks_p_value": normality["p_value"],
            "dropped_count": self.dropped_count
        }


class CLTController:
    """
    Sampling-distribution simulation for the Central Limit Theorem.

    Usage:
        controller = CLTController(Distribution.DICE)
        controller.set_sample_size(30)
        controller.snapshot().print_summary()

        controller.start()              # animation: n = 31, 32, ... 50
        while controller.is_stepping:
            controller.tick()           # normally called by a timer

    Attributes:
        configuration: The CLTConfiguration in use.
        distribution: Distribution currently sampled.
        sample_size: Current n.
        state: Current CLTState.
        random_source: Uniform source for every draw.
    """

    def __init__(
        self,
        distribution: Distribution = Distribution.UNIFORM,
        configuration: Optional[CLTConfiguration] = None,
        random_source: Optional[AbstractRandomSource] = None,
        on_update: Optional[Callable[[CLTSnapshot], None]] = None,
        verbose: bool = False
    ) -> None:
        """
        Initialize at the minimum sample size with a first histogram.

        Args:
            distribution: Initial distribution.
            configuration: Parameters. Defaults to CLTConfiguration().
            random_source: Uniform source. Defaults to a fresh unseeded source.
            on_update: Called with a new snapshot after every state change.
            verbose: If True, print each recompute.
        """
        self.configuration: CLTConfiguration = configuration or CLTConfiguration()
        self.distribution: Distribution = distribution
        self.random_source: AbstractRandomSource = random_source or NumpyRandomSource()
        self.on_update: Optional[Callable[[CLTSnapshot], None]] = on_update
        self.verbose: bool = verbose

        self.state: CLTState = CLTState.IDLE
        self.sample_size: int = self.configuration.min_sample_size
        self._result: SamplingDistributionResult = self._recompute()

    @property
    def is_stepping(self) -> bool:
        return self.state is CLTState.STEPPING

    # ===== TRANSITIONS =====

    def start(self) -> CLTSnapshot:
        """
        Idle -> Stepping. At the maximum n the animation restarts from
        the minimum.
        """
        if self.state is CLTState.STEPPING:
            return self.snapshot()

        if self.sample_size >= self.configuration.max_sample_size:
            self.sample_size = self.configuration.min_sample_size
            self._result = self._recompute()

        self.state = CLTState.STEPPING
        return self._publish()

    def pause(self) -> CLTSnapshot:
        """Stepping -> Idle, keeping the current n."""
        self.state = CLTState.IDLE
        return self._publish()

    def toggle(self) -> CLTSnapshot:
        """Start/pause button."""
        if self.state is CLTState.STEPPING:
            return self.pause()
        return self.start()

    def tick(self) -> CLTSnapshot:
        """
        Advance n by one and recompute. A no-op unless Stepping.

        Reaching the maximum n ends the animation.
        """
        if self.state is not CLTState.STEPPING:
            return self.snapshot()

        if self.sample_size >= self.configuration.max_sample_size:
            self.state = CLTState.IDLE
            return self._publish()

        self.sample_size += 1
        self._result = self._recompute()

        if self.sample_size >= self.configuration.max_sample_size:
            self.state = CLTState.IDLE

        return self._publish()

    def set_sample_size(self, sample_size: int) -> CLTSnapshot:
        """
        Manual slider: cancel any animation and recompute at this n.

        Raises:
            ValueError: If sample_size is outside [min_sample_size, max_sample_size].
        """
        config = self.configuration
        if not config.min_sample_size <= sample_size <= config.max_sample_size:
            raise ValueError(
                f"Sample size must be in [{config.min_sample_size}, "
                f"{config.max_sample_size}]. Received: {sample_size}"
            )

        # Stop stepping before writing so a pending tick cannot overwrite n
        self.state = CLTState.IDLE
        self.sample_size = int(sample_size)
        self._result = self._recompute()
        return self._publish()

    def set_distribution(self, distribution: Distribution) -> CLTSnapshot:
        """Switch distribution. Stops the animation and returns to the minimum n."""
        self.distribution = distribution
        return self.reset()

    def reset(self) -> CLTSnapshot:
        """Stop the animation and recompute at the minimum n."""
        self.state = CLTState.IDLE
        self.sample_size = self.configuration.min_sample_size
        self._result = self._recompute()
        return self._publish()

    def run_animation(self) -> List[CLTSnapshot]:
        """
        Headless helper: start and tick until the animation ends.

        Returns:
            The snapshot after every step, the start snapshot first.
        """
        history: List[CLTSnapshot] = [self.start()]
        while self.state is CLTState.STEPPING:
            history.append(self.tick())
        return history

    # ===== SNAPSHOTS =====

    def snapshot(self) -> CLTSnapshot:
        """Return an immutable view of the current state."""
        config = self.configuration
        return CLTSnapshot(
            state=self.state,
            distribution=self.distribution,
            sample_size=self.sample_size,
            max_sample_size=config.max_sample_size,
            total_simulations=config.total_simulations,
            bins=self._result.bins,
            mean_of_sample_means=self._result.mean_of_sample_means,
            theoretical_mean=theoretical_mean(self.distribution),
            standard_error=compute_standard_error(
                theoretical_std_dev(self.distribution), self.sample_size
            ),
            x_domain=display_domain(self.distribution),
            y_domain=y_axis_domain(
                self.distribution, config.max_sample_size, config.y_axis_headroom
            ),
            dropped_count=self._result.dropped_count,
            sample_means=self._result.sample_means
        )

    def _recompute(self) -> SamplingDistributionResult:
        result: SamplingDistributionResult = recompute(
            self.distribution,
            self.sample_size,
            self.configuration.total_simulations,
            self.random_source,
            self.configuration.bin_count
        )
        result.sample_means.flags.writeable = False

        if self.verbose:
            print(f"  CLT [{self.distribution.value}] n = {self.sample_size:>3}: "
                  f"mean of means = {result.mean_of_sample_means:.4f}")

        return result

    def _publish(self) -> CLTSnapshot:
        current: CLTSnapshot = self.snapshot()
        if self.on_update is not None:
            self.on_update(current)
        return current
