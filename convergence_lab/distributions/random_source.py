"""
Random Source
=============

This module provides the uniform random sources that drive every
simulation in the package.

All distributions in the library are derived from uniform draws in
[0, 1) by inverse-transform rules, so a single uniform stream is enough
to reproduce any run. Swapping the source lets tests replay a fixed
sequence of uniforms and check the exact values the engine produces.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

import numpy as np


class AbstractRandomSource(ABC):
    """Abstract base class for uniform random sources."""

    @abstractmethod
    def uniform(self, size: Optional[int] = None) -> Union[float, np.ndarray]:
        """
        Draw uniform values in [0, 1).

        Args:
            size: If None, return a single float. Otherwise return a
                numpy array with this many values.
        """
        pass


class NumpyRandomSource(AbstractRandomSource):
    """
    Uniform source backed by a numpy Generator (PCG64).

    Two sources created with the same seed produce the same stream.

    Attributes:
        seed: The seed passed to numpy.random.default_rng (None = fresh entropy).
        generator: The underlying numpy Generator.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed: Optional[int] = seed
        self.generator: np.random.Generator = np.random.default_rng(seed)

    def uniform(self, size: Optional[int] = None) -> Union[float, np.ndarray]:
        if size is None:
            return float(self.generator.random())
        return self.generator.random(size)


class SequenceRandomSource(AbstractRandomSource):
    """
    Replays a fixed list of uniform values, wrapping around at the end.

    Used to make simulations fully deterministic: the same list of
    uniforms always yields the same samples, running means and bins.
    """

    def __init__(self, values: Sequence[float]) -> None:
        """
        Initialize the replay source.

        Args:
            values: Uniform values in [0, 1]. A value of exactly 1 is
                accepted so that edge handling can be exercised.

        Raises:
            ValueError: If the list is empty or a value is outside [0, 1].
        """
        if len(values) == 0:
            raise ValueError("SequenceRandomSource needs at least one value.")

        values_array: np.ndarray = np.asarray(values, dtype=float)
        if np.any(values_array < 0.0) or np.any(values_array > 1.0):
            raise ValueError(
                f"Uniform values must lie in [0, 1]. "
                f"Received range: [{values_array.min()}, {values_array.max()}]"
            )

        self.values: np.ndarray = values_array
        self.position: int = 0

    def uniform(self, size: Optional[int] = None) -> Union[float, np.ndarray]:
        if size is None:
            value = float(self.values[self.position])
            self.position = (self.position + 1) % len(self.values)
            return value

        indices: np.ndarray = (self.position + np.arange(size)) % len(self.values)
        self.position = int((self.position + size) % len(self.values))
        return self.values[indices]

    def reset(self) -> None:
        """Rewind to the first value."""
        self.position = 0
