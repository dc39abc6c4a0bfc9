"""
Running Mean Accumulator
========================

The accumulator is the only statistical state of the LLN simulation.
It keeps a cumulative sum and a sample count; the running mean is
derived from them on demand.

Mathematical Description:
    S[k] = S[k-1] + x[k]
    N[k] = N[k-1] + 1
    mean[k] = S[k] / N[k]      (defined as 0 while N = 0)

By the Law of Large Numbers, mean[k] converges to the population mean
as k grows.
"""

from typing import Iterable


class RunningMeanAccumulator:
    """
    Cumulative sum and count of the samples drawn so far.

    Attributes:
        cumulative_sum (float): Sum of every value added since the last reset.
        sample_count (int): Number of values added since the last reset.
    """

    def __init__(self) -> None:
        self.cumulative_sum: float = 0.0
        self.sample_count: int = 0

    def add(self, value: float) -> float:
        """
        Add one sample and return the updated running mean.
        """
        self.cumulative_sum = self.cumulative_sum + value
        self.sample_count = self.sample_count + 1
        return self.running_mean

    def add_many(self, values: Iterable[float]) -> float:
        """Add every value in order and return the final running mean."""
        for value in values:
            self.add(float(value))
        return self.running_mean

    @property
    def running_mean(self) -> float:
        """Current mean, or 0 before the first sample."""
        if self.sample_count == 0:
            return 0.0
        return self.cumulative_sum / self.sample_count

    def reset(self) -> None:
        """Clear the sum and count."""
        self.cumulative_sum = 0.0
        self.sample_count = 0
