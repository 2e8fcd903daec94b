"""Uniform random parent selection with replacement."""

import numpy as np

from eps_nsga.population import Population
from eps_nsga.solution import Solution


def random_selection():
    """Create a parent selector that ignores fitness entirely.

    Useful as a baseline and for problems where selection pressure comes only
    from survival.

    Returns:
        A ParentSelector callable.

    Example:
        >>> selector = random_selection()
        >>> parents = selector(3, population, rng)
    """

    def selector(arity: int, population: Population, rng: np.random.Generator) -> list[Solution]:
        if arity <= 0:
            raise ValueError(f"arity must be positive, got {arity}")
        if len(population) == 0:
            raise ValueError("cannot select parents from an empty population")
        indices = rng.integers(0, len(population), size=arity)
        return [population[int(i)] for i in indices]

    return selector
