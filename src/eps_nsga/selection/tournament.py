"""Crowded tournament selection with replacement."""

import numpy as np

from eps_nsga.comparators import Preference, crowded_compare
from eps_nsga.population import Population
from eps_nsga.solution import Solution


def crowded_tournament(tournament_size: int = 2):
    """Create a crowded tournament parent selector.

    Candidates are drawn uniformly with replacement. Within a tournament the
    winner is decided by:
    1. Constraint violation and Pareto dominance
    2. If neither dominates, crowding distance (higher is better for diversity)
    Ties keep the earlier candidate.

    Args:
        tournament_size: Number of individuals in each tournament. Default 2.

    Returns:
        A ParentSelector callable.

    Raises:
        ValueError: If tournament_size is not positive.

    Example:
        >>> selector = crowded_tournament(tournament_size=2)
        >>> parents = selector(2, population, rng)
    """
    if tournament_size < 1:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(arity: int, population: Population, rng: np.random.Generator) -> list[Solution]:
        """Select parents using crowded tournament selection.

        Args:
            arity: Number of parents to select.
            population: Population to select from.
            rng: Random number generator for reproducibility.

        Returns:
            List of selected parents.

        Raises:
            ValueError: If arity is not positive or the population is empty.
        """
        if arity <= 0:
            raise ValueError(f"arity must be positive, got {arity}")
        pop_size = len(population)
        if pop_size == 0:
            raise ValueError("cannot select parents from an empty population")

        selected: list[Solution] = []
        for _ in range(arity):
            candidates = rng.integers(0, pop_size, size=tournament_size)

            best = population[int(candidates[0])]
            for c in candidates[1:]:
                challenger = population[int(c)]
                if crowded_compare(challenger, best, population.maximize) is Preference.FIRST:
                    best = challenger

            selected.append(best)

        return selected

    return selector
