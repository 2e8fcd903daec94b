"""Population container for NSGA-II optimization.

A Population is a mutable, ordered collection of Solutions that can rank
itself by non-dominated sorting and shrink itself back to a target size:

- add / add_all append without sorting
- non_dominated_sort assigns rank and per-front crowding distance to every member
- truncate keeps the best members by (rank ascending, crowding descending)

Sorting is lazy: the population remembers whether members were added since the
last sort and update() re-sorts only in that case.
"""

from collections.abc import Iterable, Iterator, Sequence

import numpy as np

from eps_nsga.primitives import crowding_distance, non_dominated_sort, orient
from eps_nsga.solution import Solution


class Population:
    """Mutable list-backed collection of solutions.

    Attributes:
        maximize: Boolean mask of maximized objectives, or None (all minimized).

    Example:
        >>> pop = Population()
        >>> pop.add_all(Solution(x=np.zeros(1), objectives=o) for o in np.eye(2))
        >>> fronts = pop.non_dominated_sort()
        >>> [s.rank for s in pop]
        [0, 0]
    """

    def __init__(
        self,
        solutions: Iterable[Solution] = (),
        maximize: Sequence[bool] | np.ndarray | None = None,
    ) -> None:
        self.maximize = None if maximize is None else np.array(maximize, dtype=bool)
        self._solutions: list[Solution] = []
        self._modified = False
        self.add_all(solutions)

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self._solutions)

    def __getitem__(self, idx: int) -> Solution:
        """Return the member at position idx (supports negative indexing).

        Raises:
            TypeError: If idx is not an integer.
            IndexError: If idx is out of bounds.
        """
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")
        n = len(self)
        if idx < -n or idx >= n:
            raise IndexError(f"index {idx} is out of bounds for population with {n} individuals")
        return self._solutions[idx]

    def __repr__(self) -> str:
        return f"Population(n={len(self)}, modified={self._modified})"

    def add(self, solution: Solution) -> None:
        """Append one solution. Sorting is deferred until it is needed.

        Raises:
            TypeError: If solution is not a Solution.
        """
        if not isinstance(solution, Solution):
            raise TypeError(f"expected a Solution, got {type(solution).__name__}")
        self._solutions.append(solution)
        self._modified = True

    def add_all(self, solutions: Iterable[Solution]) -> None:
        """Append every solution in order."""
        for solution in solutions:
            self.add(solution)

    @property
    def modified(self) -> bool:
        """True if members changed since the last non-dominated sort."""
        return self._modified

    @property
    def objectives(self) -> np.ndarray:
        """Objective values of all members as an array of shape (n, n_obj).

        Raises:
            ValueError: If any member is unevaluated or objective counts differ.
        """
        if not self._solutions:
            return np.empty((0, 0), dtype=np.float64)
        rows = []
        for i, solution in enumerate(self._solutions):
            if solution.objectives is None:
                raise ValueError(f"solution {i} has not been evaluated; objectives are required for sorting")
            rows.append(solution.objectives)
        n_obj = {row.shape[0] for row in rows}
        if len(n_obj) > 1:
            raise ValueError(f"solutions have inconsistent objective counts: {sorted(n_obj)}")
        return np.stack(rows)

    @property
    def constraint_violation(self) -> np.ndarray:
        """Constraint violations of all members, shape (n,)."""
        return np.array([s.constraint_violation for s in self._solutions], dtype=np.float64)

    def non_dominated_sort(self) -> list[list[Solution]]:
        """Partition members into fronts and assign rank and crowding distance.

        Front 0 holds the members no other member dominates; front i holds the
        members dominated only by members of fronts 0..i-1. Constraint
        violation is compared before objectives. Crowding distance is computed
        separately within each front.

        Returns:
            List of fronts in rank order. Each front lists its members in
            population order.

        Raises:
            ValueError: If any member has not been evaluated.
        """
        if not self._solutions:
            self._modified = False
            return []

        objectives = orient(self.objectives, self.maximize)
        violation = self.constraint_violation
        ranks = non_dominated_sort(objectives, violation if np.any(violation > 0) else None)

        fronts: list[list[Solution]] = []
        for r in range(int(ranks.max()) + 1):
            front = [self._solutions[i] for i in np.flatnonzero(ranks == r)]
            for solution in front:
                solution.rank = r
            self.assign_crowding_distance(front)
            fronts.append(front)

        self._modified = False
        return fronts

    def update(self) -> None:
        """Re-sort only if members were added since the last sort."""
        if self._modified:
            self.non_dominated_sort()

    def assign_crowding_distance(self, front: Sequence[Solution]) -> None:
        """Compute and store crowding distances for the members of one front.

        Args:
            front: Evaluated solutions belonging to the same front.
        """
        if len(front) == 0:
            return
        objectives = orient(np.stack([s.objectives for s in front]), self.maximize)
        for solution, distance in zip(front, crowding_distance(objectives)):
            solution.crowding_distance = float(distance)

    def truncate(self, size: int) -> None:
        """Shrink the population to at most size members.

        Fronts are taken whole in rank order until the next front would not
        fit. That front is cut by crowding distance (largest first; equal
        distances keep population order) and its survivors get their crowding
        distance recomputed among themselves. Everyone else is dropped.

        Args:
            size: Target population size.

        Raises:
            ValueError: If size is negative or members are unevaluated.

        Example:
            >>> pop.truncate(100)
            >>> len(pop) <= 100
            True
        """
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        if len(self) <= size:
            return

        survivors: list[Solution] = []
        for front in self.non_dominated_sort():
            if len(survivors) + len(front) <= size:
                survivors.extend(front)
                continue

            remaining = size - len(survivors)
            if remaining > 0:
                cd = np.array([s.crowding_distance for s in front], dtype=np.float64)
                keep = np.sort(np.argsort(-cd, kind="stable")[:remaining])
                kept = [front[i] for i in keep]
                self.assign_crowding_distance(kept)
                survivors.extend(kept)
            break

        self._solutions = survivors
        self._modified = False

    @property
    def pareto_front(self) -> list[Solution]:
        """Members of rank 0, sorting first if needed."""
        self.update()
        return [s for s in self._solutions if s.rank == 0]
