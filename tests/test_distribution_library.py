"""Tests for convergence_lab.distributions.distribution_library."""

import math

import numpy as np
import pytest
from scipy import stats

from convergence_lab.distributions.distribution_library import (
    Distribution,
    display_domain,
    mean,
    normal_pdf,
    running_mean_axis_range,
    sample,
    sample_many,
    theoretical_mean,
    theoretical_std_dev,
    variance,
)
from convergence_lab.distributions.random_source import (
    NumpyRandomSource,
    SequenceRandomSource,
)


# ===== Theoretical moments =====


@pytest.mark.parametrize(
    "distribution, expected_mean, expected_std",
    [
        (Distribution.BERNOULLI, 0.5, 0.5),
        (Distribution.DICE, 3.5, math.sqrt(35.0 / 12.0)),
        (Distribution.UNIFORM, 0.5, math.sqrt(1.0 / 12.0)),
        (Distribution.EXPONENTIAL, 1.0, 1.0),
    ],
)
def test_theoretical_moments(distribution, expected_mean, expected_std):
    assert theoretical_mean(distribution) == expected_mean
    assert theoretical_std_dev(distribution) == pytest.approx(expected_std)


def test_dice_std_dev_rounded_value():
    assert theoretical_std_dev(Distribution.DICE) == pytest.approx(1.7078, abs=1e-4)
    assert theoretical_std_dev(Distribution.UNIFORM) == pytest.approx(0.2887, abs=1e-4)


def test_display_domains():
    assert display_domain(Distribution.BERNOULLI) == (-0.1, 1.1)
    assert display_domain(Distribution.DICE) == (1.0, 6.0)
    assert display_domain(Distribution.UNIFORM) == (0.0, 1.0)
    assert display_domain(Distribution.EXPONENTIAL) == (0.0, 3.0)


def test_running_mean_axis_ranges():
    assert running_mean_axis_range(Distribution.DICE) == (1.0, 6.0)
    assert running_mean_axis_range(Distribution.EXPONENTIAL) == (0.0, 3.0)
    assert running_mean_axis_range(Distribution.BERNOULLI) == (0.0, 1.2)
    assert running_mean_axis_range(Distribution.UNIFORM) == (0.0, 1.2)


# ===== Lookup by name =====


@pytest.mark.parametrize(
    "name, expected",
    [
        ("dice", Distribution.DICE),
        ("DICE", Distribution.DICE),
        ("Discrete Uniform (Dice)", Distribution.DICE),
        ("bernoulli", Distribution.BERNOULLI),
        ("Exponential", Distribution.EXPONENTIAL),
        ("Uniform (Continuous)", Distribution.UNIFORM),
    ],
)
def test_from_name(name, expected):
    assert Distribution.from_name(name) is expected


def test_from_name_unknown():
    with pytest.raises(ValueError, match="Valid choices"):
        Distribution.from_name("cauchy")


# ===== Sampling rules =====


def test_bernoulli_threshold():
    """U < 0.5 gives 0, U >= 0.5 gives 1."""
    source = SequenceRandomSource([0.49, 0.5, 0.0, 0.99])
    values = [sample(Distribution.BERNOULLI, source) for _ in range(4)]
    assert values == [0.0, 1.0, 0.0, 1.0]


def test_dice_faces():
    """floor(6U) + 1 maps [0, 1) onto faces 1..6."""
    source = SequenceRandomSource([0.0, 0.5, 0.999, 0.2])
    values = [sample(Distribution.DICE, source) for _ in range(4)]
    assert values == [1.0, 4.0, 6.0, 2.0]


def test_dice_never_exceeds_six_at_one():
    """A uniform of exactly 1 still yields face 6."""
    assert sample(Distribution.DICE, SequenceRandomSource([1.0])) == 6.0


def test_uniform_passthrough():
    assert sample(Distribution.UNIFORM, SequenceRandomSource([0.25])) == 0.25


def test_exponential_inverse_cdf():
    """-ln(1 - 0.5) = ln 2."""
    value = sample(Distribution.EXPONENTIAL, SequenceRandomSource([0.5]))
    assert value == pytest.approx(math.log(2.0))


def test_exponential_finite_at_one():
    """U = 1 would be -ln(0); the draw must stay finite."""
    value = sample(Distribution.EXPONENTIAL, SequenceRandomSource([1.0]))
    assert math.isfinite(value)
    assert value > 30.0


def test_sample_many_matches_sample():
    """Vectorized and scalar sampling consume uniforms identically."""
    uniforms = [0.05, 0.33, 0.5, 0.71, 0.98]
    for distribution in Distribution:
        scalar_source = SequenceRandomSource(uniforms)
        vector_source = SequenceRandomSource(uniforms)
        scalar_values = [sample(distribution, scalar_source) for _ in uniforms]
        vector_values = sample_many(distribution, len(uniforms), vector_source)
        np.testing.assert_allclose(vector_values, scalar_values)


def test_sample_many_edge_sizes():
    assert sample_many(Distribution.DICE, 0).shape == (0,)
    with pytest.raises(ValueError):
        sample_many(Distribution.DICE, -1)


def test_sample_without_source_uses_default():
    value = sample(Distribution.UNIFORM)
    assert 0.0 <= value < 1.0


def test_discrete_supports():
    source = NumpyRandomSource(11)
    bernoulli = sample_many(Distribution.BERNOULLI, 2000, source)
    dice = sample_many(Distribution.DICE, 2000, source)
    assert set(np.unique(bernoulli)) == {0.0, 1.0}
    assert set(np.unique(dice)) == {1.0, 2.0, 3.0, 4.0, 5.0, 6.0}


@pytest.mark.parametrize("distribution", list(Distribution))
def test_sample_moments_match_theory(distribution):
    """Large seeded samples agree with the closed-form moments."""
    values = sample_many(distribution, 100_000, NumpyRandomSource(2024))
    sigma = theoretical_std_dev(distribution)
    assert abs(values.mean() - theoretical_mean(distribution)) < 5 * sigma / math.sqrt(len(values))
    assert values.std() == pytest.approx(sigma, rel=0.03)


# ===== Normal density =====


@pytest.mark.parametrize("sigma", [0.05, 0.5, 1.0, 2.5])
def test_normal_pdf_peak(sigma):
    assert normal_pdf(3.0, 3.0, sigma) == pytest.approx(1.0 / (sigma * math.sqrt(2 * math.pi)))


def test_normal_pdf_matches_scipy():
    x = np.linspace(-3, 5, 41)
    np.testing.assert_allclose(normal_pdf(x, 1.0, 0.7), stats.norm.pdf(x, 1.0, 0.7))


def test_normal_pdf_scalar_returns_float():
    assert isinstance(normal_pdf(0.0, 0.0, 1.0), float)


@pytest.mark.parametrize("sigma", [0.0, -1.0])
def test_normal_pdf_rejects_non_positive_sigma(sigma):
    with pytest.raises(ValueError):
        normal_pdf(0.0, 0.0, sigma)


# ===== Reducers =====


def test_mean_empty_is_zero():
    assert mean([]) == 0.0


def test_mean_values():
    assert mean([1.0, 2.0, 3.0]) == pytest.approx(2.0)


def test_variance_unbiased():
    assert variance([1.0, 2.0, 3.0, 4.0]) == pytest.approx(5.0 / 3.0)
    assert variance([1.0, 2.0, 3.0, 4.0], mean_value=2.5) == pytest.approx(5.0 / 3.0)


def test_variance_short_input_is_zero():
    assert variance([]) == 0.0
    assert variance([4.2]) == 0.0
