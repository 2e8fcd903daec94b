"""Adapters from per-individual functions to the Variation protocol.

Users usually write crossover and mutation as plain functions on decision
vectors. These adapters wrap them into Variation operators:

- CrossoverMutation: arity 2, two children per call
- MutationOnly: arity 1, one child per call
"""

from collections.abc import Callable, Sequence

import numpy as np

from eps_nsga.solution import Solution


class CrossoverMutation:
    """Two-parent variation built from crossover and mutation functions.

    Each call produces two children, one per parent ordering:
    ``mutate(crossover(p1, p2))`` and ``mutate(crossover(p2, p1))``.

    Args:
        crossover: Cross two parents to produce one child.
            Signature: (n_vars,), (n_vars,) -> (n_vars,)
        mutate: Mutate one individual.
            Signature: (n_vars,) -> (n_vars,)

    Example:
        >>> variation = CrossoverMutation(lambda a, b: (a + b) / 2, lambda x: x)
        >>> p1 = Solution(x=np.array([0.0, 0.0]))
        >>> p2 = Solution(x=np.array([1.0, 1.0]))
        >>> [child.x for child in variation.evolve([p1, p2])]
        [array([0.5, 0.5]), array([0.5, 0.5])]
    """

    arity = 2

    def __init__(
        self,
        crossover: Callable[[np.ndarray, np.ndarray], np.ndarray],
        mutate: Callable[[np.ndarray], np.ndarray],
    ) -> None:
        self.crossover = crossover
        self.mutate = mutate

    def evolve(self, parents: Sequence[Solution]) -> list[Solution]:
        if len(parents) != self.arity:
            raise ValueError(f"expected {self.arity} parents, got {len(parents)}")
        p1, p2 = parents[0].x, parents[1].x
        # User functions may work in place, so they only ever see copies
        child1 = self.mutate(self.crossover(p1.copy(), p2.copy()))
        child2 = self.mutate(self.crossover(p2.copy(), p1.copy()))
        return [Solution(x=np.asarray(child1)), Solution(x=np.asarray(child2))]


class MutationOnly:
    """Single-parent variation that only mutates.

    Args:
        mutate: Mutate one individual.
            Signature: (n_vars,) -> (n_vars,)
    """

    arity = 1

    def __init__(self, mutate: Callable[[np.ndarray], np.ndarray]) -> None:
        self.mutate = mutate

    def evolve(self, parents: Sequence[Solution]) -> list[Solution]:
        if len(parents) != self.arity:
            raise ValueError(f"expected {self.arity} parents, got {len(parents)}")
        return [Solution(x=np.asarray(self.mutate(parents[0].x.copy())))]
