"""Fixtures shared by the eps-nsga test modules.

Small hand-built solution sets for container tests, and two toy problems
(sum trade-off and ZDT1) for end-to-end runs.
"""

import numpy as np
import pytest

from eps_nsga import CrossoverMutation, Population, Solution


@pytest.fixture
def rng() -> np.random.Generator:
    """Generator with a fixed seed."""
    return np.random.default_rng(42)


@pytest.fixture
def make_solutions():
    """Factory turning objective rows (and optional violations) into evaluated solutions.

    Decision vectors are the row index, so solutions stay distinguishable.
    """

    def factory(objectives, violation=None) -> list[Solution]:
        objectives = np.asarray(objectives, dtype=np.float64)
        if violation is None:
            violation = np.zeros(len(objectives))
        return [
            Solution(x=np.array([float(i)]), objectives=objectives[i], constraint_violation=violation[i])
            for i in range(len(objectives))
        ]

    return factory


@pytest.fixture
def front_population(make_solutions) -> Population:
    """Population of four mutually nondominated solutions, already sorted.

    Objectives: (1,4), (2,3), (3,2), (4,1).
    """
    pop = Population(make_solutions([[1.0, 4.0], [2.0, 3.0], [3.0, 2.0], [4.0, 1.0]]))
    pop.non_dominated_sort()
    return pop


@pytest.fixture
def averaging_variation() -> CrossoverMutation:
    """Two-parent variation that averages parents and does not mutate."""
    return CrossoverMutation(lambda p1, p2: (p1 + p2) / 2, lambda x: x.copy())


@pytest.fixture
def simple_biobj_problem():
    """Bi-objective sum trade-off: f1 = sum(x), f2 = sum(1 - x).

    Every point of [0, 1]^3 is Pareto optimal, so any run converges at once;
    useful for exercising bookkeeping rather than search quality. Mutation
    has its own seeded generator.

    Returns:
        Dict with init, evaluate and variation.
    """
    n_vars = 3
    mutation_rng = np.random.default_rng(7)

    def init(rng: np.random.Generator) -> np.ndarray:
        return rng.uniform(0, 1, size=n_vars)

    def evaluate(x: np.ndarray) -> np.ndarray:
        return np.array([x.sum(), (1 - x).sum()])

    def crossover(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
        return (p1 + p2) / 2

    def mutate(x: np.ndarray) -> np.ndarray:
        return np.clip(x + 0.05 * mutation_rng.standard_normal(len(x)), 0, 1)

    return {"init": init, "evaluate": evaluate, "variation": CrossoverMutation(crossover, mutate)}


@pytest.fixture
def zdt1_problem():
    """ZDT1 with five variables in [0, 1] and a convex front at g = 1.

    Variation is blend crossover plus Gaussian mutation, both drawing from a
    fixture-local seeded generator.

    Returns:
        Dict with init, evaluate and variation.
    """
    n_vars = 5
    mutation_rng = np.random.default_rng(11)

    def init(rng: np.random.Generator) -> np.ndarray:
        return rng.uniform(0, 1, size=n_vars)

    def evaluate(x: np.ndarray) -> np.ndarray:
        f1 = x[0]
        g = 1 + 9 * np.mean(x[1:])
        f2 = g * (1 - np.sqrt(f1 / g))
        return np.array([f1, f2])

    def crossover(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
        alpha = mutation_rng.uniform(0, 1, size=len(p1))
        return alpha * p1 + (1 - alpha) * p2

    def mutate(x: np.ndarray) -> np.ndarray:
        return np.clip(x + 0.02 * mutation_rng.standard_normal(len(x)), 0, 1)

    return {"init": init, "evaluate": evaluate, "variation": CrossoverMutation(crossover, mutate)}
