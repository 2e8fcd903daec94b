"""eps-nsga: NSGA-II with an epsilon-box dominance archive.

A numpy implementation of the NSGA-II multi-objective evolutionary algorithm
with constraint handling, pluggable parent selection and an optional
epsilon-box archive that keeps a bounded, well-spread approximation of the
Pareto front.

Example:
    >>> from eps_nsga import CrossoverMutation, nsga2
    >>> import numpy as np
    >>> def init(rng): return rng.uniform(0, 1, size=3)
    >>> def evaluate(x): return np.array([x.sum(), (1 - x).sum()])
    >>> def crossover(p1, p2): return (p1 + p2) / 2
    >>> def mutate(x): return np.clip(x + 0.01, 0, 1)
    >>> result = nsga2(init, evaluate, CrossoverMutation(crossover, mutate),
    ...                pop_size=10, n_generations=5, epsilons=0.05, seed=42)
    >>> len(result.population)
    10
"""

from eps_nsga.algorithms import NSGAII, nsga2
from eps_nsga.archive import EpsilonBoxArchive
from eps_nsga.comparators import (
    Preference,
    binary_tournament,
    constraint_compare,
    crowded_compare,
    crowding_compare,
    pareto_compare,
)
from eps_nsga.evaluation import Evaluator
from eps_nsga.exceptions import (
    ConfigurationError,
    EpsNSGAError,
    EvaluationCancelled,
    EvaluationError,
    EvaluationTimeout,
    SelectionError,
    VariationError,
)
from eps_nsga.log import configure_logging
from eps_nsga.population import Population
from eps_nsga.primitives import (
    box_index,
    crowding_distance,
    dominates,
    dominates_matrix,
    non_dominated_sort,
    orient,
)
from eps_nsga.protocols import ParentSelector, Variation
from eps_nsga.registry import SelectionRegistry, list_selections
from eps_nsga.results import NSGA2Result
from eps_nsga.selection import PooledTournament, crowded_tournament, random_selection
from eps_nsga.solution import Solution
from eps_nsga.variation import CrossoverMutation, MutationOnly

__all__ = [
    # Algorithms
    "NSGAII",
    "nsga2",
    # Data structures
    "Solution",
    "Population",
    "EpsilonBoxArchive",
    "NSGA2Result",
    # Comparators
    "Preference",
    "constraint_compare",
    "pareto_compare",
    "crowding_compare",
    "crowded_compare",
    "binary_tournament",
    # Selection strategies
    "PooledTournament",
    "crowded_tournament",
    "random_selection",
    "SelectionRegistry",
    "list_selections",
    # Collaborator interfaces
    "ParentSelector",
    "Variation",
    "CrossoverMutation",
    "MutationOnly",
    "Evaluator",
    # Primitives
    "orient",
    "dominates",
    "dominates_matrix",
    "non_dominated_sort",
    "crowding_distance",
    "box_index",
    # Errors and logging
    "EpsNSGAError",
    "ConfigurationError",
    "SelectionError",
    "VariationError",
    "EvaluationError",
    "EvaluationTimeout",
    "EvaluationCancelled",
    "configure_logging",
]
