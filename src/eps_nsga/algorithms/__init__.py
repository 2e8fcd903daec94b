"""Evolutionary algorithm implementations."""

from eps_nsga.algorithms.nsga2 import NSGAII, nsga2

__all__ = ["NSGAII", "nsga2"]
