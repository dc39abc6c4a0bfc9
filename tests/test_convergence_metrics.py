"""Tests for convergence_lab.metrics.convergence_metrics."""

import math

import numpy as np
import pytest

from convergence_lab.metrics.convergence_metrics import (
    compute_absolute_error,
    compute_histogram_area,
    compute_histogram_fit_error,
    compute_normality_statistic,
    compute_standard_error,
)
from convergence_lab.simulation.sampling_distribution import HistogramBin


def test_standard_error():
    assert compute_standard_error(2.0, 4) == pytest.approx(1.0)
    assert compute_standard_error(math.sqrt(35 / 12), 1) == pytest.approx(1.7078, abs=1e-4)


def test_standard_error_rejects_empty_sample():
    with pytest.raises(ValueError):
        compute_standard_error(1.0, 0)


def test_absolute_error():
    assert compute_absolute_error(0.4, 0.5) == pytest.approx(0.1)
    assert compute_absolute_error(3.7, 3.5) == pytest.approx(0.2)


def test_histogram_area_and_fit_error():
    bins = [
        HistogramBin(0.0, 0.5, 1.2, 1.0),
        HistogramBin(0.5, 1.0, 0.8, 1.0),
    ]
    assert compute_histogram_area(bins) == pytest.approx(1.0)
    assert compute_histogram_fit_error(bins) == pytest.approx(0.2)


def test_histogram_area_empty():
    assert compute_histogram_area([]) == 0.0


def test_normality_statistic_for_normal_data():
    values = np.random.default_rng(0).normal(3.5, 0.2, size=2000)
    result = compute_normality_statistic(values, 3.5, 0.2)
    assert result["ks_statistic"] < 0.05
    assert 0.0 <= result["p_value"] <= 1.0


def test_normality_statistic_detects_mismatch():
    values = np.random.default_rng(0).exponential(1.0, size=2000)
    result = compute_normality_statistic(values, 1.0, 1.0)
    assert result["ks_statistic"] > 0.1
    assert result["p_value"] < 0.01


def test_normality_statistic_validates_input():
    with pytest.raises(ValueError, match="Standard error"):
        compute_normality_statistic(np.array([0.5]), 0.5, 0.0)
    with pytest.raises(ValueError):
        compute_normality_statistic(np.array([]), 0.5, 0.1)
