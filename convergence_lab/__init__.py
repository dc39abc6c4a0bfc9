"""
Convergence Lab
===============

This package provides a simulation environment for demonstrating two
classic limit theorems of probability with live-updating charts:

- Law of Large Numbers (LLN): the running mean of independent draws
  settles on the true mean of the distribution.
- Central Limit Theorem (CLT): the distribution of sample means
  approaches a normal curve with standard deviation sigma / sqrt(n).

Package Structure:
- distributions/: Random sources and the fixed set of distributions
- simulation/: LLN and CLT controllers (state machines + snapshots)
- metrics/: Standard error, histogram fit and normality diagnostics
- visualization/: Plotting and the interactive explorer
- explanation/: Optional text commentary from an external model
"""

__version__ = "1.0.0"
