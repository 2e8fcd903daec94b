"""Vectorized primitives for Pareto ranking, crowding and epsilon boxes.

Everything the containers compute about objective vectors lives here as pure
numpy functions:
- orient: bring mixed minimize/maximize objectives into minimization form
- dominates: Pareto dominance between two objective vectors
- dominates_matrix: all pairwise dominance relations, optionally constraint-aware
- non_dominated_sort: front index of every row (Deb's fast sort)
- crowding_distance: density estimate within one front
- box_index: epsilon-grid cell of objective vectors

The functions assume minimization. Containers that know about maximized
objectives call orient() before anything else.
"""

from collections.abc import Sequence

import numpy as np


def orient(objectives: np.ndarray, maximize: Sequence[bool] | np.ndarray | None = None) -> np.ndarray:
    """Return objectives in minimization form.

    Maximized objectives are negated so that smaller is always better.

    Args:
        objectives: Objective values. Shape (n_obj,) or (n, n_obj).
        maximize: Boolean mask of shape (n_obj,), True where the objective is
            maximized. None means every objective is minimized.

    Returns:
        Float array of the same shape as objectives.

    Raises:
        ValueError: If the mask length differs from the objective count.

    Examples:
        >>> orient(np.array([1.0, 2.0]), maximize=[False, True])
        array([ 1., -2.])
    """
    objectives = np.asarray(objectives, dtype=np.float64)
    if maximize is None:
        return objectives
    mask = np.asarray(maximize, dtype=bool)
    if mask.shape[0] != objectives.shape[-1]:
        raise ValueError(f"maximize has {mask.shape[0]} entries, expected {objectives.shape[-1]} objectives")
    return np.where(mask, -objectives, objectives)


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """Return True if objective vector a Pareto-dominates b.

    a must be no worse than b in every objective and strictly better in at
    least one. Equal vectors do not dominate each other.

    Args:
        a: Objective vector, shape (n_obj,), minimization form.
        b: Objective vector, shape (n_obj,), minimization form.

    Examples:
        >>> dominates(np.array([1.0, 2.0]), np.array([1.0, 3.0]))
        True
        >>> dominates(np.array([1.0, 3.0]), np.array([3.0, 1.0]))
        False
    """
    return bool(np.all(a <= b) and np.any(a < b))


def dominates_matrix(objectives: np.ndarray, violation: np.ndarray | None = None) -> np.ndarray:
    """Return the (n, n) matrix of pairwise dominance relations.

    Without violations this is plain Pareto dominance. With violations, row i
    dominates row j when its violation is strictly smaller, or when both
    violations are equal and i Pareto-dominates j. Two feasible rows
    (violation 0) therefore compare by objectives alone.

    Args:
        objectives: Objective matrix, shape (n, n_obj), minimization form.
        violation: Aggregated constraint violations, shape (n,), or None.

    Returns:
        Boolean matrix where entry [i, j] is True iff row i dominates row j.

    Examples:
        >>> objs = np.array([[1.0, 1.0], [2.0, 2.0], [1.0, 2.0]])
        >>> dominates_matrix(objs)[0, 1]
        True
        >>> dominates_matrix(objs, violation=np.array([0.5, 0.0, 0.0]))[0, 1]
        False
    """
    # (n, 1, n_obj) against (1, n, n_obj)
    lhs = objectives[:, np.newaxis, :]
    rhs = objectives[np.newaxis, :, :]
    pareto = np.all(lhs <= rhs, axis=2) & np.any(lhs < rhs, axis=2)

    if violation is None:
        return pareto

    v_row = violation[:, np.newaxis]
    v_col = violation[np.newaxis, :]
    return (v_row < v_col) | ((v_row == v_col) & pareto)


def non_dominated_sort(objectives: np.ndarray, violation: np.ndarray | None = None) -> np.ndarray:
    """Return the front index of every row.

    Follows Deb's fast non-dominated sort: count for each row how many rows
    dominate it, take all rows with count zero as the next front, then
    subtract the front's dominance from the remaining counts. Runs in
    O(M * N^2) for N rows and M objectives.

    Args:
        objectives: Objective matrix, shape (n, n_obj), minimization form.
        violation: Optional constraint violations, shape (n,). See dominates_matrix.

    Returns:
        Integer array of shape (n,). 0 marks the nondominated rows, 1 the rows
        dominated only by front 0, and so on.

    Examples:
        >>> non_dominated_sort(np.array([[3.0, 3.0], [1.0, 1.0], [2.0, 2.0]]))
        array([2, 0, 1])
    """
    n = objectives.shape[0]
    ranks = np.full(n, -1, dtype=np.int64)
    if n == 0:
        return ranks

    dom = dominates_matrix(objectives, violation)
    counts = dom.sum(axis=0).astype(np.int64)
    unranked = np.ones(n, dtype=bool)

    rank = 0
    while unranked.any():
        front = unranked & (counts == 0)
        if not front.any():
            # Only reachable with NaN objectives; lump the rest together
            ranks[unranked] = rank
            break
        ranks[front] = rank
        unranked &= ~front
        counts -= dom[front].sum(axis=0)
        rank += 1

    return ranks


def crowding_distance(front_objectives: np.ndarray) -> np.ndarray:
    """Return the crowding distance of every member of one front.

    For each objective the front is ordered by that objective. The two
    extremes get an infinite distance; every interior member adds the gap
    between its two neighbors divided by the objective's range. Objectives
    with zero range add nothing. Larger distances mean sparser regions.

    Args:
        front_objectives: Objective matrix of ONE front, shape (n_front, n_obj).

    Returns:
        Float array of shape (n_front,).

    Examples:
        >>> cd = crowding_distance(np.array([[1.0, 4.0], [2.0, 3.0], [3.0, 2.0], [4.0, 1.0]]))
        >>> cd[0], cd[1]
        (inf, 1.3333333333333333)
    """
    n_front = front_objectives.shape[0]
    if n_front <= 2:
        # Each member is an extreme of every objective
        return np.full(n_front, np.inf)

    distances = np.zeros(n_front, dtype=np.float64)
    for column in front_objectives.T:
        # Stable, so equal values keep front order
        order = np.argsort(column, kind="stable")
        ordered = column[order]
        span = ordered[-1] - ordered[0]

        distances[order[[0, -1]]] = np.inf
        if span > 0:
            distances[order[1:-1]] += (ordered[2:] - ordered[:-2]) / span

    return distances


def box_index(objectives: np.ndarray, epsilons: np.ndarray) -> np.ndarray:
    """Map objective vectors (minimization form) to epsilon-grid cells.

    Args:
        objectives: Objective values. Shape (n_obj,) or (n, n_obj).
        epsilons: Positive box widths, shape (n_obj,).

    Returns:
        Integer array of the same shape as objectives holding
        floor(objective / epsilon) per objective.

    Examples:
        >>> box_index(np.array([0.25, 1.0]), np.array([0.1, 0.5]))
        array([2, 2])
    """
    return np.floor(np.asarray(objectives) / epsilons).astype(np.int64)
