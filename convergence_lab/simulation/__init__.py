"""
Simulation Module
=================

This module provides the two simulation controllers and the numeric
building blocks they share.
"""

from .running_mean_accumulator import RunningMeanAccumulator
from .lln_controller import (
    LLNController,
    LLNConfiguration,
    LLNSnapshot,
    LLNState,
    RunningSeriesPoint
)
from .sampling_distribution import (
    HistogramBin,
    SamplingDistributionResult,
    simulate_sample_means,
    build_density_histogram,
    recompute,
    y_axis_ceiling,
    y_axis_domain
)
from .clt_controller import CLTController, CLTConfiguration, CLTSnapshot, CLTState

__all__ = [
    "RunningMeanAccumulator",
    "LLNController",
    "LLNConfiguration",
    "LLNSnapshot",
    "LLNState",
    "RunningSeriesPoint",
    "HistogramBin",
    "SamplingDistributionResult",
    "simulate_sample_means",
    "build_density_histogram",
    "recompute",
    "y_axis_ceiling",
    "y_axis_domain",
    "CLTController",
    "CLTConfiguration",
    "CLTSnapshot",
    "CLTState"
]
