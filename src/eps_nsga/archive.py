"""Epsilon-box dominance archive.

The archive keeps a bounded, well-spread approximation of the Pareto front.
Objective space is divided into a grid of boxes of width epsilon per
objective, and the archive holds at most one solution per occupied box:

- Solutions in different boxes compare by box dominance, i.e. Pareto dominance
  of their integer box vectors. A box-nondominated set is also Pareto
  nondominated, so archive members never dominate each other.
- Solutions in the same box compare by Pareto dominance, then by distance to
  the box's lower corner (closer wins, the incumbent keeps exact ties).
- Constraint violation is compared before anything else.

The archive also tracks epsilon-progress: additions that reached a new box
count as improvements.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence

import numpy as np

from eps_nsga.comparators import Preference
from eps_nsga.exceptions import ConfigurationError
from eps_nsga.primitives import box_index, dominates, orient
from eps_nsga.solution import Solution

logger = logging.getLogger(__name__)


class EpsilonBoxArchive:
    """Nondominated archive bounded by an epsilon grid.

    Members are independent copies of the solutions passed to add(), so later
    changes to the originals (e.g. re-ranking in a population) never leak into
    the archive.

    Attributes:
        epsilons: Box widths per objective, or a single broadcast width.
        maximize: Boolean mask of maximized objectives, or None.
        improvements: Accepted additions that did not just replace the
            incumbent of their own box.
        dominating_improvements: Accepted additions that evicted at least one
            member of another box.

    Example:
        >>> archive = EpsilonBoxArchive(epsilons=0.1)
        >>> archive.add(Solution(x=np.zeros(1), objectives=np.array([0.05, 0.95])))
        True
        >>> archive.add(Solution(x=np.zeros(1), objectives=np.array([0.02, 0.91])))
        True
        >>> len(archive)  # same box, the newcomer is closer to the corner
        1
    """

    def __init__(
        self,
        epsilons: float | Sequence[float] | np.ndarray,
        maximize: Sequence[bool] | np.ndarray | None = None,
    ) -> None:
        eps = np.atleast_1d(np.asarray(epsilons, dtype=np.float64))
        if eps.ndim != 1 or eps.size == 0:
            raise ConfigurationError(f"epsilons must be a scalar or a 1D sequence, got shape {eps.shape}")
        if not np.all(np.isfinite(eps)) or np.any(eps <= 0):
            raise ConfigurationError(
                f"epsilons must be positive and finite, got {eps.tolist()}",
                suggestion="Pick one box width per objective on the scale of the desired resolution.",
            )
        self.maximize = None if maximize is None else np.array(maximize, dtype=bool)
        if self.maximize is not None and eps.size > 1 and eps.size != self.maximize.size:
            raise ConfigurationError(
                f"epsilons has {eps.size} entries but maximize has {self.maximize.size}"
            )
        self.epsilons = eps
        self.improvements = 0
        self.dominating_improvements = 0
        self._members: list[Solution] = []
        self._boxes: list[np.ndarray] = []

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self._members)

    def __getitem__(self, idx: int) -> Solution:
        return self._members[idx]

    def __repr__(self) -> str:
        return f"EpsilonBoxArchive(n={len(self)}, epsilons={self.epsilons.tolist()})"

    @property
    def objectives(self) -> np.ndarray:
        """Objective values of all members, shape (n, n_obj)."""
        if not self._members:
            return np.empty((0, 0), dtype=np.float64)
        return np.stack([s.objectives for s in self._members])

    def _epsilons_for(self, n_obj: int) -> np.ndarray:
        if self.epsilons.size == 1:
            return np.full(n_obj, self.epsilons[0])
        if self.epsilons.size != n_obj:
            raise ValueError(f"solution has {n_obj} objectives, archive has {self.epsilons.size} epsilons")
        return self.epsilons

    def _oriented(self, solution: Solution) -> np.ndarray:
        if solution.objectives is None:
            raise ValueError("cannot archive an unevaluated solution")
        return orient(solution.objectives, self.maximize)

    def box_index(self, solution: Solution) -> np.ndarray:
        """Return the grid cell of an evaluated solution."""
        objectives = self._oriented(solution)
        return box_index(objectives, self._epsilons_for(objectives.shape[0]))

    def _compare(
        self,
        new: Solution,
        new_box: np.ndarray,
        old: Solution,
        old_box: np.ndarray,
    ) -> tuple[Preference, bool]:
        """Compare a candidate with a member. Returns (preference, same_box)."""
        if new.constraint_violation < old.constraint_violation:
            return Preference.FIRST, False
        if old.constraint_violation < new.constraint_violation:
            return Preference.SECOND, False

        if not np.array_equal(new_box, old_box):
            if dominates(new_box, old_box):
                return Preference.FIRST, False
            if dominates(old_box, new_box):
                return Preference.SECOND, False
            return Preference.NEITHER, False

        new_obj = self._oriented(new)
        old_obj = self._oriented(old)
        if dominates(new_obj, old_obj):
            return Preference.FIRST, True
        if dominates(old_obj, new_obj):
            return Preference.SECOND, True

        eps = self._epsilons_for(new_obj.shape[0])
        corner = new_box * eps
        new_dist = np.linalg.norm(new_obj - corner)
        old_dist = np.linalg.norm(old_obj - corner)
        # Exact ties keep the incumbent
        if new_dist < old_dist:
            return Preference.FIRST, True
        return Preference.SECOND, True

    def add(self, solution: Solution) -> bool:
        """Offer one solution to the archive.

        The candidate is rejected if any member beats it. Otherwise it is
        stored (as a copy) and every member it beats is evicted.

        Args:
            solution: Evaluated solution with finite objectives.

        Returns:
            True if the solution was stored, False if it was rejected.

        Raises:
            ValueError: If the solution is unevaluated or its objective count
                does not match the epsilons.
        """
        new_box = self.box_index(solution)

        evicted: list[int] = []
        same_box = False
        dominated_other = False
        for i, (old, old_box) in enumerate(zip(self._members, self._boxes)):
            flag, in_same_box = self._compare(solution, new_box, old, old_box)
            if flag is Preference.SECOND:
                return False
            if flag is Preference.FIRST:
                evicted.append(i)
                if in_same_box:
                    same_box = True
                else:
                    dominated_other = True

        if evicted:
            logger.debug("archive evicted %d member(s) for box %s", len(evicted), new_box.tolist())
            evicted_set = set(evicted)
            self._members = [s for i, s in enumerate(self._members) if i not in evicted_set]
            self._boxes = [b for i, b in enumerate(self._boxes) if i not in evicted_set]

        if not same_box:
            self.improvements += 1
        if dominated_other:
            self.dominating_improvements += 1

        self._members.append(solution.copy())
        self._boxes.append(new_box)
        return True

    def add_all(self, solutions: Iterable[Solution]) -> int:
        """Offer solutions one at a time, in order.

        Each addition sees the archive as left by the previous one.

        Returns:
            Number of solutions that were stored (some may have been evicted
            again by later solutions of the same batch).
        """
        return sum(1 for solution in solutions if self.add(solution))
