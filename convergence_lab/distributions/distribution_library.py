"""
Distribution Library
====================

This module defines the fixed set of distributions used by the LLN and
CLT simulations, together with their closed-form moments and display
domains.

Supported distributions:

    Distribution            Sampling rule (U ~ Uniform[0, 1))     Mean    Std Dev
    ---------------------   ----------------------------------   -----   -----------------
    Bernoulli (p = 0.5)     0 if U < 0.5 else 1                  0.5     0.5
    Continuous Uniform      U                                    0.5     sqrt(1/12) ~ 0.2887
    Exponential (rate 1)    -ln(1 - U)                           1.0     1.0
    Discrete Uniform (dice) floor(6 * U) + 1                     3.5     sqrt(35/12) ~ 1.7078

Every sample is derived from exactly one uniform draw, so a run is
fully determined by its random source.

The set is closed: constants are looked up by enum member and never
change at runtime.
"""

import math
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .random_source import AbstractRandomSource, NumpyRandomSource


class Distribution(Enum):
    """The supported distributions. Values are the display labels."""

    BERNOULLI = "Bernoulli (Coin Flip)"
    UNIFORM = "Uniform (Continuous)"
    EXPONENTIAL = "Exponential"
    DICE = "Discrete Uniform (Dice)"

    @classmethod
    def from_name(cls, name: str) -> "Distribution":
        """
        Look up a distribution by member name or display label.

        Member names are matched case-insensitively, so "dice", "DICE"
        and "Discrete Uniform (Dice)" all resolve to Distribution.DICE.

        Raises:
            ValueError: If the name matches no distribution.
        """
        for member in cls:
            if name.strip().upper() == member.name or name == member.value:
                return member

        valid_choices: str = ", ".join(member.name.lower() for member in cls)
        raise ValueError(
            f"Unknown distribution '{name}'. Valid choices: {valid_choices}"
        )


# ===== CLOSED-FORM CONSTANTS =====
_THEORETICAL_MEANS: Dict[Distribution, float] = {
    Distribution.BERNOULLI: 0.5,
    Distribution.UNIFORM: 0.5,
    Distribution.EXPONENTIAL: 1.0,
    Distribution.DICE: 3.5,
}

_THEORETICAL_STD_DEVS: Dict[Distribution, float] = {
    Distribution.BERNOULLI: 0.5,                    # sqrt(p * (1 - p))
    Distribution.UNIFORM: math.sqrt(1.0 / 12.0),    # (b - a) / sqrt(12)
    Distribution.EXPONENTIAL: 1.0,                  # 1 / rate
    Distribution.DICE: math.sqrt(35.0 / 12.0),      # sqrt((k^2 - 1) / 12), k = 6
}

# Fixed x-range of the CLT histogram. Independent of n so the
# histogram visibly narrows around the mean as n grows.
_DISPLAY_DOMAINS: Dict[Distribution, Tuple[float, float]] = {
    Distribution.BERNOULLI: (-0.1, 1.1),
    Distribution.UNIFORM: (0.0, 1.0),
    Distribution.EXPONENTIAL: (0.0, 3.0),
    Distribution.DICE: (1.0, 6.0),
}

# Fixed y-range of the LLN running-mean chart
_RUNNING_MEAN_AXIS_RANGES: Dict[Distribution, Tuple[float, float]] = {
    Distribution.BERNOULLI: (0.0, 1.2),
    Distribution.UNIFORM: (0.0, 1.2),
    Distribution.EXPONENTIAL: (0.0, 3.0),
    Distribution.DICE: (1.0, 6.0),
}

# Largest double strictly below 1. Keeps -ln(1 - U) finite and
# floor(6 * U) <= 5 even if a source hands out exactly 1.
_LARGEST_UNIFORM: float = float(np.nextafter(1.0, 0.0))

_DEFAULT_RANDOM_SOURCE: AbstractRandomSource = NumpyRandomSource()


def get_default_random_source() -> AbstractRandomSource:
    """Return the shared unseeded source used when none is supplied."""
    return _DEFAULT_RANDOM_SOURCE


def _transform_uniforms(distribution: Distribution, uniforms: np.ndarray) -> np.ndarray:
    """Map uniform draws to samples of the given distribution."""
    uniforms = np.minimum(uniforms, _LARGEST_UNIFORM)

    if distribution is Distribution.BERNOULLI:
        return np.where(uniforms < 0.5, 0.0, 1.0)
    elif distribution is Distribution.DICE:
        return np.floor(uniforms * 6.0) + 1.0
    elif distribution is Distribution.UNIFORM:
        return uniforms.astype(float)
    elif distribution is Distribution.EXPONENTIAL:
        # Inverse CDF of Exp(1)
        return -np.log1p(-uniforms)
    raise ValueError(f"Unsupported distribution: {distribution!r}")


def sample(
    distribution: Distribution,
    random_source: Optional[AbstractRandomSource] = None
) -> float:
    """
    Draw one independent value from the distribution.

    Args:
        distribution: Which distribution to sample.
        random_source: Uniform source. Defaults to the shared unseeded source.

    Returns:
        float: One sample.
    """
    source: AbstractRandomSource = random_source or _DEFAULT_RANDOM_SOURCE
    uniform_value: float = source.uniform()
    return float(_transform_uniforms(distribution, np.array([uniform_value]))[0])


def sample_many(
    distribution: Distribution,
    size: int,
    random_source: Optional[AbstractRandomSource] = None
) -> np.ndarray:
    """
    Draw `size` independent values in one vectorized call.

    Consumes uniforms in the same order as `size` calls to `sample`,
    so both paths give identical values for the same source.

    Raises:
        ValueError: If size is negative.
    """
    if size < 0:
        raise ValueError(f"Sample size must be non-negative. Received: {size}")
    if size == 0:
        return np.empty(0, dtype=float)

    source: AbstractRandomSource = random_source or _DEFAULT_RANDOM_SOURCE
    uniforms: np.ndarray = np.asarray(source.uniform(size), dtype=float)
    return _transform_uniforms(distribution, uniforms)


def theoretical_mean(distribution: Distribution) -> float:
    """Return the population mean of the distribution."""
    return _THEORETICAL_MEANS[distribution]


def theoretical_std_dev(distribution: Distribution) -> float:
    """Return the population standard deviation of the distribution."""
    return _THEORETICAL_STD_DEVS[distribution]


def display_domain(distribution: Distribution) -> Tuple[float, float]:
    """Return the fixed (min, max) x-range used for CLT histogram binning."""
    return _DISPLAY_DOMAINS[distribution]


def running_mean_axis_range(distribution: Distribution) -> Tuple[float, float]:
    """Return the fixed (min, max) y-range of the LLN running-mean chart."""
    return _RUNNING_MEAN_AXIS_RANGES[distribution]


def normal_pdf(
    x: Union[float, np.ndarray],
    mean: float,
    std_dev: float
) -> Union[float, np.ndarray]:
    """
    Evaluate the normal probability density function.

    Formula:
        f(x) = 1 / (sigma * sqrt(2 * pi)) * exp(-0.5 * ((x - mu) / sigma)^2)

    Args:
        x: Point(s) at which to evaluate the density.
        mean: Mean mu of the normal distribution.
        std_dev: Standard deviation sigma (must be positive).

    Returns:
        The density at x (float for scalar input, array otherwise).

    Raises:
        ValueError: If std_dev <= 0.
    """
    if std_dev <= 0:
        raise ValueError(
            f"Standard deviation must be positive. Received: {std_dev}"
        )

    z_score = (np.asarray(x, dtype=float) - mean) / std_dev
    density = np.exp(-0.5 * z_score ** 2) / (std_dev * math.sqrt(2.0 * math.pi))

    if np.ndim(density) == 0:
        return float(density)
    return density


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Returns 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def variance(values: Sequence[float], mean_value: Optional[float] = None) -> float:
    """
    Unbiased sample variance (n - 1 denominator).

    Args:
        values: The observations.
        mean_value: Precomputed mean. Computed from `values` if None.

    Returns:
        float: The variance, or 0 for fewer than two values.
    """
    if len(values) < 2:
        return 0.0

    if mean_value is None:
        mean_value = mean(values)

    deviations: np.ndarray = np.asarray(values, dtype=float) - mean_value
    return float(np.sum(deviations ** 2) / (len(values) - 1))
