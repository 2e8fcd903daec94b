"""Protocol definitions for the collaborators of the NSGA-II loop.

The optimizer core is independent of any concrete problem. It talks to its
collaborators through these narrow interfaces:

1. **ParentSelector**: an optional external selection strategy that returns a
   parent group of a requested size from the current population. When none is
   configured, the algorithm uses its own pooled binary tournament.

2. **Variation**: a crossover/mutation operator with a fixed arity. It turns
   exactly ``arity`` parents into zero or more unevaluated children.

Example usage:
    ```python
    class Midpoint:
        arity = 2

        def evolve(self, parents):
            x = (parents[0].x + parents[1].x) / 2
            return [Solution(x=x)]

    def first_n(arity, population, rng):
        return [population[i] for i in range(arity)]

    algorithm = NSGAII(init, evaluate, Midpoint(), pop_size=20, select=first_n)
    ```
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from eps_nsga.population import Population
from eps_nsga.solution import Solution


@runtime_checkable
class ParentSelector(Protocol):
    """Protocol for external parent selection strategies.

    Parameters:
        arity: Number of parents to return. Always >= 1.
        population: The current, sorted population (rank and crowding distance
            are up to date).
        rng: The run's random number generator. Selectors must draw all
            randomness from it so runs are reproducible.

    Returns:
        A list of exactly ``arity`` solutions taken from the population. The
        same solution may appear more than once.

    Example:
        ```python
        def random_pick(arity, population, rng):
            idx = rng.integers(0, len(population), size=arity)
            return [population[i] for i in idx]
        ```
    """

    def __call__(
        self,
        arity: int,
        population: Population,
        rng: np.random.Generator,
    ) -> list[Solution]:
        """Select a parent group from the population.

        Args:
            arity: Number of parents to return.
            population: The current population.
            rng: Random number generator for reproducibility.

        Returns:
            List of ``arity`` solutions.
        """
        ...


@runtime_checkable
class Variation(Protocol):
    """Protocol for variation (crossover/mutation) operators.

    Attributes:
        arity: Fixed number of parents consumed per call, >= 1.

    The evolve method receives exactly ``arity`` parents and returns any number
    of new, unevaluated Solutions. Parents must not be modified; children must
    not share arrays with them.
    """

    arity: int

    def evolve(self, parents: Sequence[Solution]) -> list[Solution]:
        """Produce children from a parent group.

        Args:
            parents: Exactly ``arity`` solutions.

        Returns:
            Unevaluated children (possibly empty).
        """
        ...
