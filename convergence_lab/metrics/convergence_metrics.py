"""
Convergence Metrics
===================

This module provides the numbers that quantify how far a simulation is
from its theoretical limit.

Law of Large Numbers:
    absolute error = |running mean - population mean|

Central Limit Theorem:
    standard error    SE = sigma / sqrt(n)
    histogram area    A  = sum(density_i * width_i)            (~1 for a valid density)
    fit error         L1 = sum(|density_i - pdf(mid_i)| * width_i)
    normality         Kolmogorov-Smirnov distance between the sample
                      means and Normal(mu, SE)

As n grows, SE shrinks like 1/sqrt(n) and both the fit error and the
KS distance should fall towards the sampling noise floor of M draws.
"""

import math
from typing import Dict, Sequence

import numpy as np
from scipy import stats


def compute_standard_error(std_dev: float, sample_size: int) -> float:
    """
    Standard deviation of the sampling distribution of the mean.

    Formula: SE = sigma / sqrt(n)

    Raises:
        ValueError: If sample_size < 1.
    """
    if sample_size < 1:
        raise ValueError(
            f"Sample size must be at least 1. Received: {sample_size}"
        )
    return std_dev / math.sqrt(sample_size)


def compute_absolute_error(estimate: float, expected: float) -> float:
    """Return |estimate - expected|."""
    return abs(estimate - expected)


def compute_histogram_area(bins: Sequence) -> float:
    """
    Riemann sum of a density histogram.

    Equals the fraction of sample means that landed inside the display
    domain, so it is 1 whenever nothing was dropped.
    """
    return float(sum(b.density * (b.range_end - b.range_start) for b in bins))


def compute_histogram_fit_error(bins: Sequence) -> float:
    """L1 distance between the histogram and its normal overlay."""
    return float(sum(
        abs(b.density - b.theoretical_density) * (b.range_end - b.range_start)
        for b in bins
    ))


def compute_normality_statistic(
    sample_means: np.ndarray,
    mean: float,
    standard_error: float
) -> Dict[str, float]:
    """
    Kolmogorov-Smirnov test of the sample means against Normal(mean, SE).

    Args:
        sample_means: The M simulated sample means.
        mean: Population mean (centre of the normal approximation).
        standard_error: sigma / sqrt(n) (must be positive).

    Returns:
        Dict with 'ks_statistic' and 'p_value'.

    Raises:
        ValueError: If standard_error <= 0 or no sample means are given.
    """
    if standard_error <= 0:
        raise ValueError(
            f"Standard error must be positive. Received: {standard_error}"
        )
    if len(sample_means) == 0:
        raise ValueError("At least one sample mean is required.")

    result = stats.kstest(sample_means, "norm", args=(mean, standard_error))
    return {
        "ks_statistic": float(result.statistic),
        "p_value": float(result.pvalue)
    }
