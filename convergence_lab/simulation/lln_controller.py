"""
Law of Large Numbers Controller
===============================

This module drives a single running sequence of independent samples
from one distribution and produces the time series of the running mean
versus the trial index.

State machine:

    Idle ----start----> Running ----pause----> Paused
     ^                     |  ^                   |
     |                     |  +------start--------+
     +------reset / change distribution (from any state)

The controller has no timer of its own. An external periodic timer
calls `tick()`; each tick is synchronous and leaves the controller in a
complete, consistent state before returning.

Two presentation heuristics bound the rendered series:
1. Thinning: past `thinning_threshold` samples only every
   `thinning_stride`-th sample emits a point.
2. Decimation: when the series grows beyond `max_series_points`, every
   other point is discarded (order by trial index is preserved).
Neither affects the accumulator, which always sees every sample.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..distributions.distribution_library import (
    Distribution,
    sample_many,
    theoretical_mean,
    running_mean_axis_range
)
from ..distributions.random_source import AbstractRandomSource, NumpyRandomSource
from ..metrics.convergence_metrics import compute_absolute_error
from .running_mean_accumulator import RunningMeanAccumulator


class LLNState(Enum):
    """States of the LLN controller."""

    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"


@dataclass
class LLNConfiguration:
    """
    Tunable parameters of the LLN simulation.

    Attributes:
        tick_interval_ms: Initial time between ticks in milliseconds.
        fast_speed_threshold_ms: Intervals below this use the fast batch size.
        fast_batch_size: Samples drawn per tick at high speed.
        slow_batch_size: Samples drawn per tick otherwise.
        thinning_threshold: Every sample emits a point up to this count.
        thinning_stride: Past the threshold, emit a point every this many samples.
        max_series_points: Series length that triggers decimation by 2.
        convergence_tolerance: |mean - expected| below this counts as "near".
        speed_slider_min: Lowest raw value of the (inverted) speed slider.
        speed_slider_max: Highest raw value of the (inverted) speed slider.
    """
    tick_interval_ms: int = 50
    fast_speed_threshold_ms: int = 20
    fast_batch_size: int = 5
    slow_batch_size: int = 1

    thinning_threshold: int = 200
    thinning_stride: int = 5
    max_series_points: int = 500

    convergence_tolerance: float = 0.05

    speed_slider_min: int = 1
    speed_slider_max: int = 200

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        if self.tick_interval_ms < 1:
            raise ValueError(
                f"Tick interval must be at least 1 ms. "
                f"Received: {self.tick_interval_ms}"
            )

        if self.fast_batch_size < 1 or self.slow_batch_size < 1:
            raise ValueError(
                f"Batch sizes must be at least 1. "
                f"Received: fast={self.fast_batch_size}, slow={self.slow_batch_size}"
            )

        if self.thinning_threshold < 0:
            raise ValueError(
                f"Thinning threshold must be non-negative. "
                f"Received: {self.thinning_threshold}"
            )

        if self.thinning_stride < 1:
            raise ValueError(
                f"Thinning stride must be at least 1. "
                f"Received: {self.thinning_stride}"
            )

        if self.max_series_points < 2:
            raise ValueError(
                f"Series cap must be at least 2 points. "
                f"Received: {self.max_series_points}"
            )

        if self.convergence_tolerance <= 0:
            raise ValueError(
                f"Convergence tolerance must be positive. "
                f"Received: {self.convergence_tolerance}"
            )

        if not 1 <= self.speed_slider_min < self.speed_slider_max:
            raise ValueError(
                f"Speed slider range must satisfy 1 <= min < max. "
                f"Received: [{self.speed_slider_min}, {self.speed_slider_max}]"
            )

        if self.fast_batch_size < self.slow_batch_size:
            print(
                f"WARNING: Fast batch size ({self.fast_batch_size}) is smaller "
                f"than slow batch size ({self.slow_batch_size}). High speed "
                f"settings will draw fewer samples per tick."
            )

        if self.max_series_points < self.thinning_threshold:
            print(
                f"WARNING: Series cap ({self.max_series_points}) is below the "
                f"thinning threshold ({self.thinning_threshold}). The series "
                f"will be decimated before thinning starts."
            )

    def batch_size_for_interval(self, tick_interval_ms: int) -> int:
        """Return the number of samples drawn per tick at this interval."""
        if tick_interval_ms < self.fast_speed_threshold_ms:
            return self.fast_batch_size
        return self.slow_batch_size

    def get_summary_dict(self) -> Dict[str, Any]:
        """Return a dictionary summary of the configuration."""
        return {
            "tick_interval_ms": self.tick_interval_ms,
            "fast_speed_threshold_ms": self.fast_speed_threshold_ms,
            "fast_batch_size": self.fast_batch_size,
            "slow_batch_size": self.slow_batch_size,
            "thinning_threshold": self.thinning_threshold,
            "thinning_stride": self.thinning_stride,
            "max_series_points": self.max_series_points,
            "convergence_tolerance": self.convergence_tolerance
        }


@dataclass(frozen=True)
class RunningSeriesPoint:
    """One point of the running-mean chart."""
    trial_index: int
    running_mean: float
    expected_mean: float


@dataclass(frozen=True)
class LLNSnapshot:
    """
    Immutable view of the LLN controller for the presentation layer.

    Attributes:
        state: Current controller state.
        distribution: Distribution being sampled.
        sample_count: Number of samples drawn since the last reset.
        cumulative_sum: Sum of those samples.
        running_mean: cumulative_sum / sample_count (0 before any sample).
        expected_mean: Theoretical mean of the distribution.
        series: Emitted chart points, ordered by trial index.
        tick_interval_ms: Time between ticks.
        batch_size: Samples drawn per tick at this interval.
        axis_range: Fixed (min, max) y-range of the chart.
        is_near_expected: True once the running mean is within tolerance.
    """
    state: LLNState
    distribution: Distribution
    sample_count: int
    cumulative_sum: float
    running_mean: float
    expected_mean: float
    series: Tuple[RunningSeriesPoint, ...]
    tick_interval_ms: int
    batch_size: int
    axis_range: Tuple[float, float]
    is_near_expected: bool

    @property
    def absolute_error(self) -> float:
        """Distance between the running mean and the expected mean."""
        return compute_absolute_error(self.running_mean, self.expected_mean)

    def print_summary(self) -> None:
        """Print a formatted summary of the current run."""
        print("\n" + "=" * 60)
        print("LAW OF LARGE NUMBERS")
        print("=" * 60)
        print(f"  Distribution:            {self.distribution.value}")
        print(f"  State:                   {self.state.value}")
        print(f"  Total Trials (n):        {self.sample_count}")
        print(f"  Current Mean:            {self.running_mean:.4f}")
        print(f"  Theoretical Mean:        {self.expected_mean:.4f}")
        print(f"  Absolute Error:          {self.absolute_error:.4f}")
        print(f"  Chart Points:            {len(self.series)}")

        if self.sample_count == 0:
            print("  Status:                  no samples yet")
        elif self.is_near_expected:
            print("  Status:                  near expected value")
        else:
            print("  Status:                  still converging")

        print("=" * 60)

    def get_metrics_dict(self) -> Dict[str, Any]:
        """Return the run statistics as a dictionary."""
        return {
            "distribution": self.distribution.name.lower(),
            "state": self.state.value,
            "sample_count": self.sample_count,
            "running_mean": self.running_mean,
            "expected_mean": self.expected_mean,
            "absolute_error": self.absolute_error,
            "series_length": len(self.series),
            "is_near_expected": self.is_near_expected
        }


class LLNController:
    """
    Running-mean simulation for the Law of Large Numbers.

    Usage:
        controller = LLNController(Distribution.BERNOULLI)
        controller.start()
        for _ in range(1000):
            controller.tick()       # normally called by a timer
        controller.snapshot().print_summary()

    Attributes:
        configuration: The LLNConfiguration in use.
        distribution: Distribution currently sampled.
        random_source: Uniform source for every draw.
        accumulator: Cumulative sum and count.
        state: Current LLNState.
        tick_interval_ms: Current time between ticks.
    """

    def __init__(
        self,
        distribution: Distribution = Distribution.BERNOULLI,
        configuration: Optional[LLNConfiguration] = None,
        random_source: Optional[AbstractRandomSource] = None,
        on_update: Optional[Callable[[LLNSnapshot], None]] = None,
        verbose: bool = False
    ) -> None:
        """
        Initialize the controller in the Idle state.

        Args:
            distribution: Initial distribution.
            configuration: Tunables. Defaults to LLNConfiguration().
            random_source: Uniform source. Defaults to a fresh unseeded source.
            on_update: Called with a new snapshot after every state change.
            verbose: If True, print state transitions.
        """
        self.configuration: LLNConfiguration = configuration or LLNConfiguration()
        self.distribution: Distribution = distribution
        self.random_source: AbstractRandomSource = random_source or NumpyRandomSource()
        self.on_update: Optional[Callable[[LLNSnapshot], None]] = on_update
        self.verbose: bool = verbose

        self.accumulator: RunningMeanAccumulator = RunningMeanAccumulator()
        self.state: LLNState = LLNState.IDLE
        self.tick_interval_ms: int = self.configuration.tick_interval_ms
        self._series: List[RunningSeriesPoint] = []

    # ===== DERIVED QUANTITIES =====

    @property
    def expected_mean(self) -> float:
        return theoretical_mean(self.distribution)

    @property
    def batch_size(self) -> int:
        return self.configuration.batch_size_for_interval(self.tick_interval_ms)

    @property
    def is_running(self) -> bool:
        return self.state is LLNState.RUNNING

    # ===== TRANSITIONS =====

    def start(self) -> LLNSnapshot:
        """Idle/Paused -> Running."""
        if self.state is not LLNState.RUNNING:
            self._set_state(LLNState.RUNNING)
        return self._publish()

    def pause(self) -> LLNSnapshot:
        """Running -> Paused. No effect in other states."""
        if self.state is LLNState.RUNNING:
            self._set_state(LLNState.PAUSED)
        return self._publish()

    def toggle(self) -> LLNSnapshot:
        """Start/pause button: pause when running, start otherwise."""
        if self.state is LLNState.RUNNING:
            return self.pause()
        return self.start()

    def reset(self) -> LLNSnapshot:
        """Any -> Idle. Clears the accumulator and the series."""
        self.accumulator.reset()
        self._series = []
        self._set_state(LLNState.IDLE)
        return self._publish()

    def set_distribution(self, distribution: Distribution) -> LLNSnapshot:
        """Switch distribution. Always resets to Idle."""
        self.distribution = distribution
        return self.reset()

    def set_tick_interval(self, tick_interval_ms: int) -> LLNSnapshot:
        """
        Set the time between ticks directly. The state is unchanged.

        Raises:
            ValueError: If tick_interval_ms < 1.
        """
        if tick_interval_ms < 1:
            raise ValueError(
                f"Tick interval must be at least 1 ms. Received: {tick_interval_ms}"
            )
        self.tick_interval_ms = int(tick_interval_ms)
        return self._publish()

    def set_speed_from_slider(self, slider_value: int) -> LLNSnapshot:
        """
        Map the inverted speed slider (higher = faster) to a tick interval.

        interval = slider_max + 1 - slider_value, with the slider value
        clamped to [slider_min, slider_max].
        """
        config = self.configuration
        clamped_value: int = max(
            config.speed_slider_min, min(config.speed_slider_max, int(slider_value))
        )
        return self.set_tick_interval(config.speed_slider_max + 1 - clamped_value)

    def speed_slider_value(self) -> int:
        """Inverse of set_speed_from_slider for the current interval."""
        return self.configuration.speed_slider_max + 1 - self.tick_interval_ms

    # ===== TICK =====

    def tick(self) -> LLNSnapshot:
        """
        Draw one batch of samples and extend the series.

        A no-op unless Running.
        """
        if self.state is not LLNState.RUNNING:
            return self.snapshot()

        config = self.configuration
        expected: float = self.expected_mean
        values = sample_many(self.distribution, self.batch_size, self.random_source)

        for value in values:
            running_mean: float = self.accumulator.add(float(value))
            count: int = self.accumulator.sample_count

            if count <= config.thinning_threshold or count % config.thinning_stride == 0:
                self._series.append(RunningSeriesPoint(
                    trial_index=count,
                    running_mean=running_mean,
                    expected_mean=expected
                ))

        if len(self._series) > config.max_series_points:
            self._series = self._series[::2]

        return self._publish()

    def run_trials(self, number_of_trials: int) -> LLNSnapshot:
        """
        Headless helper: start and tick until at least `number_of_trials`
        samples have been drawn, then pause.
        """
        self.start()
        while self.accumulator.sample_count < number_of_trials:
            self.tick()
        return self.pause()

    # ===== SNAPSHOTS =====

    def snapshot(self) -> LLNSnapshot:
        """Return an immutable view of the current state."""
        running_mean: float = self.accumulator.running_mean
        count: int = self.accumulator.sample_count
        is_near: bool = count > 0 and (
            compute_absolute_error(running_mean, self.expected_mean)
            < self.configuration.convergence_tolerance
        )

        return LLNSnapshot(
            state=self.state,
            distribution=self.distribution,
            sample_count=count,
            cumulative_sum=self.accumulator.cumulative_sum,
            running_mean=running_mean,
            expected_mean=self.expected_mean,
            series=tuple(self._series),
            tick_interval_ms=self.tick_interval_ms,
            batch_size=self.batch_size,
            axis_range=running_mean_axis_range(self.distribution),
            is_near_expected=is_near
        )

    def _set_state(self, new_state: LLNState) -> None:
        if self.verbose and new_state is not self.state:
            print(f"  LLN [{self.distribution.value}]: "
                  f"{self.state.value} -> {new_state.value}")
        self.state = new_state

    def _publish(self) -> LLNSnapshot:
        current: LLNSnapshot = self.snapshot()
        if self.on_update is not None:
            self.on_update(current)
        return current
