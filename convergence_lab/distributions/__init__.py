"""
Distributions Module
====================

This module contains the uniform random sources and the fixed set of
probability distributions sampled by the simulations.
"""

from .random_source import AbstractRandomSource, NumpyRandomSource, SequenceRandomSource
from .distribution_library import (
    Distribution,
    sample,
    sample_many,
    theoretical_mean,
    theoretical_std_dev,
    display_domain,
    running_mean_axis_range,
    normal_pdf,
    mean,
    variance,
    get_default_random_source
)

__all__ = [
    "AbstractRandomSource",
    "NumpyRandomSource",
    "SequenceRandomSource",
    "Distribution",
    "sample",
    "sample_many",
    "theoretical_mean",
    "theoretical_std_dev",
    "display_domain",
    "running_mean_axis_range",
    "normal_pdf",
    "mean",
    "variance",
    "get_default_random_source"
]
