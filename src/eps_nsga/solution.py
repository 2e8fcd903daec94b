"""Solution record for multi-objective optimization.

A Solution couples a decision vector with its evaluation (objective values and
aggregated constraint violation) and with the ranking metadata the owning
Population assigns during non-dominated sorting.

The evaluation is written exactly once. Rank and crowding distance are
rewritten every time the owning container re-sorts. Solutions never share
arrays: every container that takes ownership stores its own copy.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(eq=False)
class Solution:
    """A single candidate solution.

    Equality is identity: two Solution objects are never equal unless they are
    the same object, even when their values coincide.

    Attributes:
        x: Decision variables. Opaque to the optimizer, copied on construction.
        objectives: Objective values, shape (n_obj,), or None if not evaluated.
        constraint_violation: Aggregated infeasibility, >= 0 (0 means feasible).
        rank: Index of the non-dominated front within the owning population,
            or None if not sorted yet.
        crowding_distance: Diversity estimate within the front, or None.

    Example:
        >>> s = Solution(x=np.array([0.2, 0.8]))
        >>> s.evaluated
        False
        >>> s.assign_evaluation(np.array([1.0, 2.0]))
        >>> s.n_obj
        2
    """

    x: np.ndarray
    objectives: np.ndarray | None = None
    constraint_violation: float = 0.0
    rank: int | None = None
    crowding_distance: float | None = None

    def __post_init__(self) -> None:
        """Validate fields and copy arrays.

        Raises:
            TypeError: If x or objectives is not a numpy array.
            ValueError: If objectives is not 1D or the violation is negative.
        """
        if not isinstance(self.x, np.ndarray):
            raise TypeError(f"x must be a numpy array, got {type(self.x).__name__}")
        self.x = self.x.copy()

        if self.objectives is not None:
            if not isinstance(self.objectives, np.ndarray):
                raise TypeError(f"objectives must be a numpy array, got {type(self.objectives).__name__}")
            if self.objectives.ndim != 1:
                raise ValueError(f"objectives must be 1D, got shape {self.objectives.shape}")
            self.objectives = self.objectives.astype(np.float64, copy=True)

        self.constraint_violation = float(self.constraint_violation)
        if self.constraint_violation < 0:
            raise ValueError(f"constraint_violation must be non-negative, got {self.constraint_violation}")

    def assign_evaluation(self, objectives: np.ndarray, constraint_violation: float = 0.0) -> None:
        """Record the evaluation result. Allowed only once per solution.

        Args:
            objectives: Objective values, shape (n_obj,).
            constraint_violation: Aggregated infeasibility, >= 0.

        Raises:
            ValueError: If the solution was already evaluated, objectives is not
                1D, or the violation is negative.
        """
        if self.objectives is not None:
            raise ValueError("solution has already been evaluated")
        objectives = np.asarray(objectives, dtype=np.float64)
        if objectives.ndim != 1:
            raise ValueError(f"objectives must be 1D, got shape {objectives.shape}")
        if constraint_violation < 0:
            raise ValueError(f"constraint_violation must be non-negative, got {constraint_violation}")
        self.objectives = objectives.copy()
        self.constraint_violation = float(constraint_violation)

    def copy(self) -> "Solution":
        """Return an independent copy, including evaluation and ranking metadata."""
        return Solution(
            x=self.x,
            objectives=self.objectives,
            constraint_violation=self.constraint_violation,
            rank=self.rank,
            crowding_distance=self.crowding_distance,
        )

    @property
    def evaluated(self) -> bool:
        return self.objectives is not None

    @property
    def feasible(self) -> bool:
        return self.constraint_violation == 0.0

    @property
    def n_obj(self) -> int | None:
        """Number of objectives, or None if not evaluated."""
        if self.objectives is None:
            return None
        return self.objectives.shape[0]
