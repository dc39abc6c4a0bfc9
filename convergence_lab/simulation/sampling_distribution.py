"""
Sampling Distribution of the Mean
=================================

This module builds the density histogram of simulated sample means that
the CLT view renders, along with its theoretical normal overlay.

Algorithm (for distribution D, sample size n, M simulations):
1. Draw M independent size-n samples and take each sample's mean.
2. Split the fixed display domain [lo, hi] of D into B equal bins.
3. Count the means falling in each bin. Means outside [lo, hi] are
   dropped; the right edge hi belongs to the last bin.
4. Normalize counts to density:  density = (count / M) / bin_width
   so that sum(density * bin_width) = fraction kept (~1).
5. Overlay Normal(mu, SE) evaluated at each bin midpoint, where
   SE = sigma / sqrt(n).

KNOWN ACCURACY BOUNDARY:
    Dropping out-of-domain means is a visualization choice. The domain
    is wide enough for the dice, uniform and coin at every n, but the
    exponential tail beyond 3 loses about 5% of the mass at n = 1 and
    a vanishing share for larger n.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..distributions.distribution_library import (
    Distribution,
    sample_many,
    theoretical_mean,
    theoretical_std_dev,
    display_domain,
    normal_pdf,
    mean
)
from ..distributions.random_source import AbstractRandomSource
from ..metrics.convergence_metrics import compute_standard_error

DEFAULT_BIN_COUNT: int = 50


@dataclass(frozen=True)
class HistogramBin:
    """
    One bar of the CLT density histogram.

    Attributes:
        range_start: Left edge.
        range_end: Right edge (range_start < range_end).
        density: Simulated density (relative frequency / bin width).
        theoretical_density: Normal approximation at the bin midpoint.
    """
    range_start: float
    range_end: float
    density: float
    theoretical_density: float

    @property
    def width(self) -> float:
        return self.range_end - self.range_start

    @property
    def midpoint(self) -> float:
        return (self.range_start + self.range_end) / 2.0

    @property
    def label(self) -> str:
        """Axis label: the midpoint with two decimals."""
        return f"{self.midpoint:.2f}"


@dataclass(frozen=True)
class SamplingDistributionResult:
    """
    Output of one full CLT recomputation.

    Attributes:
        distribution: Distribution sampled.
        sample_size: n, the size of each sample.
        total_simulations: M, the number of sample means.
        bins: The density histogram, ordered left to right.
        mean_of_sample_means: Average of the M sample means.
        dropped_count: Sample means that fell outside the display domain.
        sample_means: The raw M sample means.
    """
    distribution: Distribution
    sample_size: int
    total_simulations: int
    bins: Tuple[HistogramBin, ...]
    mean_of_sample_means: float
    dropped_count: int
    sample_means: np.ndarray

    @property
    def standard_error(self) -> float:
        return compute_standard_error(
            theoretical_std_dev(self.distribution), self.sample_size
        )


def simulate_sample_means(
    distribution: Distribution,
    sample_size: int,
    total_simulations: int,
    random_source: Optional[AbstractRandomSource] = None
) -> np.ndarray:
    """
    Draw `total_simulations` independent samples of size `sample_size`
    and return the mean of each.

    Simulation i consumes draws i*n .. i*n + n - 1 of the source.

    Raises:
        ValueError: If sample_size or total_simulations is below 1.
    """
    if sample_size < 1:
        raise ValueError(f"Sample size must be at least 1. Received: {sample_size}")
    if total_simulations < 1:
        raise ValueError(
            f"Number of simulations must be at least 1. Received: {total_simulations}"
        )

    draws: np.ndarray = sample_many(
        distribution, sample_size * total_simulations, random_source
    )
    return draws.reshape(total_simulations, sample_size).mean(axis=1)


def build_density_histogram(
    sample_means: np.ndarray,
    distribution: Distribution,
    sample_size: int,
    bin_count: int = DEFAULT_BIN_COUNT
) -> Tuple[HistogramBin, ...]:
    """
    Bin sample means into a density histogram over the display domain.

    Args:
        sample_means: The simulated means (M values).
        distribution: Determines the display domain and the overlay.
        sample_size: n, used for the standard error of the overlay.
        bin_count: Number of equal-width bins.

    Returns:
        Tuple of `bin_count` contiguous HistogramBin objects.

    Raises:
        ValueError: If there are no sample means or bin_count < 1.
    """
    total: int = len(sample_means)
    if total == 0:
        raise ValueError("Cannot build a histogram from zero sample means.")
    if bin_count < 1:
        raise ValueError(f"Bin count must be at least 1. Received: {bin_count}")

    domain_min, domain_max = display_domain(distribution)
    edges: np.ndarray = np.linspace(domain_min, domain_max, bin_count + 1)
    bin_width: float = (domain_max - domain_min) / bin_count

    counts, _ = np.histogram(sample_means, bins=edges)

    # Divide by M, not by the in-range count, so dropped means lower the area
    densities: np.ndarray = counts / total / bin_width

    standard_error: float = compute_standard_error(
        theoretical_std_dev(distribution), sample_size
    )
    midpoints: np.ndarray = (edges[:-1] + edges[1:]) / 2.0
    overlay: np.ndarray = normal_pdf(midpoints, theoretical_mean(distribution), standard_error)

    return tuple(
        HistogramBin(
            range_start=float(edges[i]),
            range_end=float(edges[i + 1]),
            density=float(densities[i]),
            theoretical_density=float(overlay[i])
        )
        for i in range(bin_count)
    )


def recompute(
    distribution: Distribution,
    sample_size: int,
    total_simulations: int,
    random_source: Optional[AbstractRandomSource] = None,
    bin_count: int = DEFAULT_BIN_COUNT
) -> SamplingDistributionResult:
    """
    Run a full re-simulation for (distribution, n, M).

    There is no incremental state: every call draws M fresh samples.
    The same frozen random stream always yields identical bins.
    """
    sample_means: np.ndarray = simulate_sample_means(
        distribution, sample_size, total_simulations, random_source
    )
    bins: Tuple[HistogramBin, ...] = build_density_histogram(
        sample_means, distribution, sample_size, bin_count
    )

    domain_min, domain_max = display_domain(distribution)
    inside: int = int(np.count_nonzero(
        (sample_means >= domain_min) & (sample_means <= domain_max)
    ))

    return SamplingDistributionResult(
        distribution=distribution,
        sample_size=sample_size,
        total_simulations=total_simulations,
        bins=bins,
        mean_of_sample_means=mean(sample_means),
        dropped_count=total_simulations - inside,
        sample_means=sample_means
    )


def y_axis_ceiling(
    distribution: Distribution,
    max_sample_size: int,
    headroom: float = 1.15
) -> float:
    """
    Fixed top of the CLT density axis for a whole animation.

    The normal curve is tallest at the largest n:
        peak = 1 / (SE_max * sqrt(2 * pi)),  SE_max = sigma / sqrt(n_max)
    The ceiling is peak * headroom, rounded to two decimals.
    """
    min_standard_error: float = compute_standard_error(
        theoretical_std_dev(distribution), max_sample_size
    )
    peak: float = 1.0 / (min_standard_error * math.sqrt(2.0 * math.pi))
    return round(peak * headroom, 2)


def y_axis_domain(
    distribution: Distribution,
    max_sample_size: int,
    headroom: float = 1.15
) -> Tuple[float, float]:
    """Return (0, ceiling) for the CLT density axis."""
    return (0.0, y_axis_ceiling(distribution, max_sample_size, headroom))
