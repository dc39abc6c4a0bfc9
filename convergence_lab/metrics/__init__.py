"""
Metrics Module
==============

This module contains functions for measuring convergence:
- Standard error and absolute error
- Histogram area and fit error against the normal overlay
- Kolmogorov-Smirnov normality statistic
"""

from .convergence_metrics import (
    compute_standard_error,
    compute_absolute_error,
    compute_histogram_area,
    compute_histogram_fit_error,
    compute_normality_statistic
)

__all__ = [
    "compute_standard_error",
    "compute_absolute_error",
    "compute_histogram_area",
    "compute_histogram_fit_error",
    "compute_normality_statistic"
]
