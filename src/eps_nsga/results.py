"""Result type for NSGA-II runs.

NSGA2Result is a frozen snapshot of a run: the population and archive are
copied on construction, so continuing the run afterwards never changes a
result already handed out.
"""

from dataclasses import dataclass

import numpy as np

from eps_nsga.solution import Solution


@dataclass(frozen=True)
class NSGA2Result:
    """Snapshot of an NSGA-II run.

    Attributes:
        population: Final population members with rank and crowding distance.
        archive: Epsilon-box archive members, or None if no archive was used.
        generations: Number of generations completed.
        evaluations: Total number of objective function evaluations performed.

    Example:
        >>> s = Solution(x=np.array([0.0]), objectives=np.array([1.0, 2.0]), rank=0, crowding_distance=np.inf)
        >>> result = NSGA2Result(population=(s,), archive=None, generations=3, evaluations=40)
        >>> result.objectives
        array([[1., 2.]])
    """

    population: tuple[Solution, ...]
    archive: tuple[Solution, ...] | None
    generations: int
    evaluations: int

    def __post_init__(self) -> None:
        """Validate counters and copy solutions.

        Raises:
            ValueError: If generations or evaluations is negative.
        """
        if self.generations < 0:
            raise ValueError(f"generations must be non-negative, got {self.generations}")
        if self.evaluations < 0:
            raise ValueError(f"evaluations must be non-negative, got {self.evaluations}")

        object.__setattr__(self, "population", tuple(s.copy() for s in self.population))
        if self.archive is not None:
            object.__setattr__(self, "archive", tuple(s.copy() for s in self.archive))

    @property
    def x(self) -> np.ndarray:
        """Decision variables of the population, shape (n, n_vars)."""
        return np.stack([s.x for s in self.population])

    @property
    def objectives(self) -> np.ndarray:
        """Objective values of the population, shape (n, n_obj)."""
        return np.stack([s.objectives for s in self.population])

    @property
    def rank(self) -> np.ndarray:
        """Pareto rank per population member, shape (n,)."""
        return np.array([s.rank for s in self.population], dtype=np.int64)

    @property
    def crowding_distance(self) -> np.ndarray:
        """Crowding distance per population member, shape (n,)."""
        return np.array([s.crowding_distance for s in self.population], dtype=np.float64)

    @property
    def pareto_front(self) -> tuple[Solution, ...]:
        """Population members of rank 0."""
        return tuple(s for s in self.population if s.rank == 0)

    @property
    def archive_objectives(self) -> np.ndarray | None:
        """Objective values of the archive, or None without an archive."""
        if self.archive is None:
            return None
        if not self.archive:
            return np.empty((0, 0), dtype=np.float64)
        return np.stack([s.objectives for s in self.archive])
