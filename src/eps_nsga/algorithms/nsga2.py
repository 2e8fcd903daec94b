"""NSGA-II with an optional epsilon-box dominance archive.

Each generation:
1. Build offspring until there are at least as many as population members:
   select a parent group, pass it through the variation operator, collect
   every child.
2. Evaluate the whole offspring batch at once (optionally in parallel).
3. Offer the offspring to the archive, if one is attached.
4. Merge offspring into the population and truncate back to its size by
   non-dominated rank and crowding distance.

Parent selection is either the classic NSGA-II binary tournament without
replacement (the default) or an external strategy, chosen once at
construction.

Example:
    >>> import numpy as np
    >>> from eps_nsga import CrossoverMutation, EpsilonBoxArchive, NSGAII
    >>>
    >>> def init(rng):
    ...     return rng.uniform(0, 1, size=3)
    >>>
    >>> def evaluate(x):
    ...     return np.array([x.sum(), (1 - x).sum()])
    >>>
    >>> variation = CrossoverMutation(lambda a, b: (a + b) / 2, lambda x: np.clip(x + 0.01, 0, 1))
    >>> algorithm = NSGAII(init, evaluate, variation, pop_size=20,
    ...                    archive=EpsilonBoxArchive(epsilons=0.05), seed=42)
    >>> result = algorithm.run(n_generations=10)
    >>> result.generations
    10
"""

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

# Import selection to trigger strategy registration
import eps_nsga.selection  # noqa: F401
from eps_nsga.archive import EpsilonBoxArchive
from eps_nsga.evaluation import Evaluator
from eps_nsga.exceptions import ConfigurationError, SelectionError, VariationError
from eps_nsga.population import Population
from eps_nsga.protocols import ParentSelector, Variation
from eps_nsga.registry import SelectionRegistry
from eps_nsga.results import NSGA2Result
from eps_nsga.selection.pooled import PooledTournament
from eps_nsga.solution import Solution

logger = logging.getLogger(__name__)


class _PooledSelection:
    """Default strategy: binary tournament without replacement, pool reset per generation."""

    def __init__(self, rng: np.random.Generator) -> None:
        self.tournament = PooledTournament(rng)

    def begin_generation(self) -> None:
        self.tournament.reset()

    def parents(self, arity: int, population: Population) -> list[Solution]:
        return self.tournament(arity, population)


class _ExternalSelection:
    """Delegates to a user or registry supplied ParentSelector."""

    def __init__(self, selector: ParentSelector, rng: np.random.Generator) -> None:
        self.selector = selector
        self.rng = rng

    def begin_generation(self) -> None:
        pass

    def parents(self, arity: int, population: Population) -> list[Solution]:
        parents = list(self.selector(arity, population, self.rng))
        if len(parents) != arity:
            raise SelectionError(f"selection strategy returned {len(parents)} parents, expected {arity}")
        return parents


class NSGAII:
    """Generational NSGA-II optimizer.

    Args:
        init: Initialize one individual.
            Signature: (rng,) -> (n_vars,)
        evaluate: Evaluate one individual, returning objectives or a tuple
            (objectives, constraint_violation). May also be a configured
            Evaluator, in which case n_workers, timeout and cancel must be
            left at their defaults.
        variation: Variation operator with a fixed positive ``arity``.
        pop_size: Population size N.
        archive: Optional epsilon-box archive that collects every evaluated solution.
        select: Parent selection. None uses binary tournament without
            replacement; a string names a registered strategy; a callable is
            used directly as a ParentSelector.
        maximize: Optional per-objective mask of maximized objectives.
        seed: Random seed. Ignored if rng is given.
        rng: Random generator to use instead of seeding a new one. Never share
            one generator between concurrent runs.
        n_workers: Parallel workers for evaluation (1 = sequential, -1 = all cores).
        timeout: Optional per-batch evaluation timeout in seconds.
        cancel: Optional threading.Event; setting it abandons the current batch.
        max_empty_variations: Consecutive variation calls yielding no children
            tolerated before the run fails.

    Raises:
        ConfigurationError: If any argument is invalid.
        KeyError: If a string strategy name is not registered.
    """

    def __init__(
        self,
        init: Callable[[np.random.Generator], np.ndarray],
        evaluate: Callable[[np.ndarray], Any] | Evaluator,
        variation: Variation,
        pop_size: int,
        *,
        archive: EpsilonBoxArchive | None = None,
        select: str | ParentSelector | None = None,
        maximize: Sequence[bool] | np.ndarray | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        n_workers: int = 1,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
        max_empty_variations: int = 100,
    ) -> None:
        if pop_size <= 0:
            raise ConfigurationError(f"pop_size must be positive, got {pop_size}")
        if not callable(init):
            raise ConfigurationError(f"init must be callable, got {type(init).__name__}")
        if variation is None or not isinstance(variation, Variation):
            raise ConfigurationError(
                "variation must provide an 'arity' attribute and an 'evolve' method",
                suggestion="Wrap plain functions with CrossoverMutation or MutationOnly.",
            )
        if not isinstance(variation.arity, (int, np.integer)) or variation.arity <= 0:
            raise ConfigurationError(f"variation arity must be a positive integer, got {variation.arity!r}")
        if max_empty_variations < 1:
            raise ConfigurationError(f"max_empty_variations must be positive, got {max_empty_variations}")
        if archive is not None and not isinstance(archive, EpsilonBoxArchive):
            raise ConfigurationError(f"archive must be an EpsilonBoxArchive, got {type(archive).__name__}")
        if archive is not None and not _same_directions(archive.maximize, maximize):
            raise ConfigurationError("archive and population must agree on which objectives are maximized")

        self.rng = rng if rng is not None else np.random.default_rng(seed)

        if isinstance(evaluate, Evaluator):
            if n_workers != 1 or timeout is not None or cancel is not None:
                raise ConfigurationError(
                    "n_workers, timeout and cancel cannot be combined with an Evaluator instance",
                    suggestion="Pass them to the Evaluator constructor instead.",
                )
            self.evaluator = evaluate
        else:
            self.evaluator = Evaluator(evaluate, n_workers=n_workers, timeout=timeout, cancel=cancel)

        if select is None:
            self._selection: _PooledSelection | _ExternalSelection = _PooledSelection(self.rng)
        elif isinstance(select, str):
            self._selection = _ExternalSelection(SelectionRegistry.get(select), self.rng)
        elif callable(select):
            self._selection = _ExternalSelection(select, self.rng)
        else:
            raise ConfigurationError(f"select must be None, a strategy name or a callable, got {type(select).__name__}")

        self.init = init
        self.variation = variation
        self.pop_size = pop_size
        self.max_empty_variations = max_empty_variations
        self._population = Population(maximize=maximize)
        self._archive = archive
        self._initialized = False
        self.generations = 0

    @property
    def population(self) -> Population:
        return self._population

    @property
    def archive(self) -> EpsilonBoxArchive | None:
        return self._archive

    @property
    def evaluations(self) -> int:
        return self.evaluator.evaluations

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Create, evaluate and rank the initial population.

        Raises:
            RuntimeError: If the algorithm was already initialized.
            EvaluationError: If the initial batch could not be evaluated.
        """
        if self._initialized:
            raise RuntimeError("algorithm already initialized")

        solutions = [Solution(x=np.asarray(self.init(self.rng))) for _ in range(self.pop_size)]
        self.evaluator(solutions)

        if self._archive is not None:
            self._archive.add_all(solutions)
        self._population.add_all(solutions)
        self._population.non_dominated_sort()

        self._initialized = True
        logger.info("initialized population of %d solutions", self.pop_size)

    def iterate(self) -> None:
        """Advance one generation, initializing first if needed.

        A generation is all-or-nothing: if evaluation fails, neither the
        population nor the archive sees any of the new offspring.

        Raises:
            VariationError: If the variation operator keeps yielding no children
                or yields something other than Solutions.
            SelectionError: If an external selector returns the wrong number of parents.
            EvaluationError: If the offspring batch could not be evaluated.
        """
        if not self._initialized:
            self.initialize()

        population = self._population
        population.update()
        population_size = len(population)
        arity = self.variation.arity

        offspring: list[Solution] = []
        empty_streak = 0
        self._selection.begin_generation()
        while len(offspring) < population_size:
            parents = self._selection.parents(arity, population)
            children = list(self.variation.evolve(parents))

            if not children:
                empty_streak += 1
                if empty_streak >= self.max_empty_variations:
                    raise VariationError(
                        f"variation produced no children in {empty_streak} consecutive calls",
                        suggestion="Check that the variation operator returns at least one child per call.",
                    )
                continue

            empty_streak = 0
            for child in children:
                if not isinstance(child, Solution):
                    raise VariationError(f"variation must return Solutions, got {type(child).__name__}")
            offspring.extend(children)

        self.evaluator(offspring)

        if self._archive is not None:
            self._archive.add_all(offspring)

        population.add_all(offspring)
        population.truncate(population_size)

        self.generations += 1
        logger.debug(
            "generation %d: %d offspring, %d on first front, archive size %s",
            self.generations,
            len(offspring),
            sum(1 for s in population if s.rank == 0),
            len(self._archive) if self._archive is not None else "n/a",
        )

    def step(self) -> None:
        """Initialize on the first call, iterate on every later call."""
        if not self._initialized:
            self.initialize()
        else:
            self.iterate()

    def result(self) -> NSGA2Result:
        """Return a snapshot of the current state.

        Raises:
            RuntimeError: If the algorithm has not been initialized.
        """
        if not self._initialized:
            raise RuntimeError("algorithm has not been initialized")
        self._population.update()
        return NSGA2Result(
            population=tuple(self._population),
            archive=tuple(self._archive) if self._archive is not None else None,
            generations=self.generations,
            evaluations=self.evaluations,
        )

    def run(
        self,
        n_generations: int,
        callback: Callable[[NSGA2Result, int], bool] | None = None,
    ) -> NSGA2Result:
        """Run up to n_generations generations.

        Args:
            n_generations: Number of generations to run.
            callback: Optional callback called at the start of each generation.
                Signature: (result: NSGA2Result, generation: int) -> bool
                If callback returns True, optimization stops early.

        Returns:
            Snapshot of the final state.

        Raises:
            ConfigurationError: If n_generations is negative.
        """
        if n_generations < 0:
            raise ConfigurationError(f"n_generations must be non-negative, got {n_generations}")

        if not self._initialized:
            self.initialize()

        logger.info("running NSGA-II for up to %d generations", n_generations)
        for gen in range(n_generations):
            if callback is not None and callback(self.result(), gen):
                logger.info("callback requested stop at generation %d", gen)
                break
            self.iterate()

        logger.info("finished after %d generations and %d evaluations", self.generations, self.evaluations)
        return self.result()


def _same_directions(a: np.ndarray | None, b: Sequence[bool] | np.ndarray | None) -> bool:
    if a is None or b is None:
        return (a is None or not np.any(a)) and (b is None or not np.any(b))
    return np.array_equal(np.asarray(a, dtype=bool), np.asarray(b, dtype=bool))


def nsga2(
    init: Callable[[np.random.Generator], np.ndarray],
    evaluate: Callable[[np.ndarray], Any],
    variation: Variation,
    pop_size: int,
    n_generations: int,
    epsilons: float | Sequence[float] | None = None,
    maximize: Sequence[bool] | None = None,
    seed: int | None = None,
    callback: Callable[[NSGA2Result, int], bool] | None = None,
    select: str | ParentSelector | None = None,
    n_workers: int = 1,
    timeout: float | None = None,
) -> NSGA2Result:
    """Run NSGA-II multi-objective optimization.

    Functional front door for NSGAII: builds the algorithm (and an
    epsilon-box archive when epsilons is given), runs it and returns the result.

    Args:
        init: Initialize one individual.
            Signature: (rng,) -> (n_vars,)
        evaluate: Evaluate one individual.
            Signature: (n_vars,) -> (n_obj,) or (n_vars,) -> ((n_obj,), violation)
            Objectives must be an array, never a bare tuple of scalars.
        variation: Variation operator (see CrossoverMutation).
        pop_size: Population size N.
        n_generations: Number of generations to run.
        epsilons: Box widths for an epsilon-box archive; None runs without one.
        maximize: Optional per-objective mask of maximized objectives.
        seed: Random seed for reproducibility. If None, uses system entropy.
        callback: Optional early-stopping callback, see NSGAII.run.
        select: Parent selection strategy, see NSGAII.
        n_workers: Number of parallel workers for evaluation.
        timeout: Optional per-batch evaluation timeout in seconds.

    Returns:
        NSGA2Result with the final population, the archive (if any),
        generations completed and evaluations performed.

    Example:
        >>> result = nsga2(init, evaluate, CrossoverMutation(cx, mut), pop_size=50,
        ...                n_generations=100, epsilons=[0.01, 0.01], seed=42)
        >>> front = result.archive_objectives
    """
    archive = EpsilonBoxArchive(epsilons, maximize=maximize) if epsilons is not None else None
    algorithm = NSGAII(
        init,
        evaluate,
        variation,
        pop_size,
        archive=archive,
        select=select,
        maximize=maximize,
        seed=seed,
        n_workers=n_workers,
        timeout=timeout,
    )
    return algorithm.run(n_generations, callback=callback)
