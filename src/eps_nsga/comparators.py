"""Pairwise comparators for solutions.

Comparators return a Preference: FIRST if the first argument is better,
SECOND if the second is better, NEITHER if there is no preference. They are
pure functions of their arguments.

- constraint_compare: smaller aggregated violation wins
- pareto_compare: constraints first, then Pareto dominance on objectives
- crowding_compare: larger crowding distance wins
- crowded_compare: pareto_compare, falling back to crowding_compare
- binary_tournament: pick the winner of two solutions under a comparator
"""

from collections.abc import Callable, Sequence
from enum import IntEnum

import numpy as np

from eps_nsga.primitives import dominates, orient
from eps_nsga.solution import Solution


class Preference(IntEnum):
    """Outcome of comparing two solutions."""

    FIRST = -1
    NEITHER = 0
    SECOND = 1


Comparator = Callable[[Solution, Solution], Preference]


def constraint_compare(a: Solution, b: Solution) -> Preference:
    """Prefer the solution with the smaller constraint violation.

    A feasible solution (violation 0) therefore always beats an infeasible one.
    """
    if a.constraint_violation < b.constraint_violation:
        return Preference.FIRST
    if b.constraint_violation < a.constraint_violation:
        return Preference.SECOND
    return Preference.NEITHER


def pareto_compare(a: Solution, b: Solution, maximize: Sequence[bool] | np.ndarray | None = None) -> Preference:
    """Compare by constraint violation, then by Pareto dominance.

    Args:
        a: First solution, must be evaluated.
        b: Second solution, must be evaluated.
        maximize: Optional per-objective mask of maximized objectives.

    Returns:
        FIRST if a dominates b, SECOND if b dominates a, NEITHER otherwise.

    Raises:
        ValueError: If either solution has not been evaluated.

    Example:
        >>> a = Solution(x=np.zeros(1), objectives=np.array([1.0, 1.0]))
        >>> b = Solution(x=np.zeros(1), objectives=np.array([2.0, 2.0]))
        >>> pareto_compare(a, b)
        <Preference.FIRST: -1>
    """
    if a.objectives is None or b.objectives is None:
        raise ValueError("cannot compare unevaluated solutions")

    flag = constraint_compare(a, b)
    if flag is not Preference.NEITHER:
        return flag

    obj_a = orient(a.objectives, maximize)
    obj_b = orient(b.objectives, maximize)
    if dominates(obj_a, obj_b):
        return Preference.FIRST
    if dominates(obj_b, obj_a):
        return Preference.SECOND
    return Preference.NEITHER


def crowding_compare(a: Solution, b: Solution) -> Preference:
    """Prefer the solution in the less crowded region (larger distance).

    Missing crowding distances count as 0.
    """
    cd_a = a.crowding_distance if a.crowding_distance is not None else 0.0
    cd_b = b.crowding_distance if b.crowding_distance is not None else 0.0
    if cd_a > cd_b:
        return Preference.FIRST
    if cd_b > cd_a:
        return Preference.SECOND
    return Preference.NEITHER


def crowded_compare(a: Solution, b: Solution, maximize: Sequence[bool] | np.ndarray | None = None) -> Preference:
    """Chained comparator: Pareto dominance first, crowding distance on ties."""
    flag = pareto_compare(a, b, maximize)
    if flag is not Preference.NEITHER:
        return flag
    return crowding_compare(a, b)


def binary_tournament(a: Solution, b: Solution, comparator: Comparator) -> Solution:
    """Return the winner of a two-way tournament.

    Ties go to the first argument so the outcome depends only on the order in
    which the candidates were drawn.
    """
    if comparator(a, b) is Preference.SECOND:
        return b
    return a
