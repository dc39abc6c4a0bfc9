"""
Visualization Module
====================

This module provides plotting functions for LLN and CLT snapshots and
the interactive explorer window.
"""

from .convergence_plotter import ConvergencePlotter
from .interactive_explorer import InteractiveExplorer

__all__ = ["ConvergencePlotter", "InteractiveExplorer"]
