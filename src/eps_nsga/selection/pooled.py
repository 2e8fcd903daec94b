"""Binary tournament selection without replacement.

This is the selection scheme of classic NSGA-II: candidates are
drawn from a pool that is refilled with complete shuffled copies of the
population, so within a refill round every member enters exactly one
tournament before anyone enters a second one.
"""

from collections import deque

import numpy as np

from eps_nsga.comparators import binary_tournament, crowded_compare
from eps_nsga.exceptions import ConfigurationError
from eps_nsga.population import Population
from eps_nsga.solution import Solution


class PooledTournament:
    """Pool-based binary tournament selector.

    The pool is a deque: shuffled copies of the population are pushed to the
    back, tournament pairs are popped from the front. Tournaments use the
    chained comparator (Pareto dominance, then crowding distance); ties go to
    the first candidate drawn.

    Call reset() whenever the population changes between generations so stale
    members never leave the pool.

    Args:
        rng: Random number generator used for shuffling.

    Example:
        >>> selector = PooledTournament(np.random.default_rng(0))
        >>> parents = selector(2, population)
        >>> len(parents)
        2
    """

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng
        self.pool: deque[Solution] = deque()

    def reset(self) -> None:
        """Empty the pool."""
        self.pool.clear()

    def refill(self, population: Population) -> None:
        """Append one shuffled copy of the whole population to the pool."""
        order = self.rng.permutation(len(population))
        self.pool.extend(population[int(i)] for i in order)

    def __call__(self, arity: int, population: Population) -> list[Solution]:
        """Select ``arity`` parents by binary tournaments from the pool.

        Raises:
            ConfigurationError: If arity is not positive or the population is empty.
        """
        if arity <= 0:
            raise ConfigurationError(f"arity must be positive, got {arity}")
        if len(population) == 0:
            raise ConfigurationError("cannot select parents from an empty population")

        while len(self.pool) < 2 * arity:
            self.refill(population)

        def comparator(a: Solution, b: Solution):
            return crowded_compare(a, b, population.maximize)

        return [
            binary_tournament(self.pool.popleft(), self.pool.popleft(), comparator)
            for _ in range(arity)
        ]
