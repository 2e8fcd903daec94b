"""Batch evaluation boundary.

The Evaluator lifts a per-individual objective function to a batch of
Solutions, optionally running it in parallel through joblib. A batch is
all-or-nothing: results are validated first and written to the solutions only
when every evaluation succeeded, so a failed, timed-out or cancelled batch
leaves its solutions untouched.
"""

import logging
import multiprocessing
import threading
import time
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
from joblib import Parallel, delayed

from eps_nsga.exceptions import (
    ConfigurationError,
    EvaluationCancelled,
    EvaluationError,
    EvaluationTimeout,
)
from eps_nsga.solution import Solution

logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluate batches of solutions with a user objective function.

    Args:
        evaluate: Evaluate one individual. Returns either the objective vector
            (unconstrained problems) or a tuple ``(objectives, violation)``
            where violation is the aggregated constraint violation (>= 0).
            Tuples are never read as objective vectors: ``return f1, f2`` is
            rejected, return ``np.array([f1, f2])`` instead.
            Signature: (n_vars,) -> (n_obj,) | tuple[(n_obj,), float]
        n_workers: 1 for sequential evaluation, -1 for all CPU cores, or any
            positive number of joblib workers. evaluate must be picklable for
            parallel execution.
        timeout: Optional limit in seconds for one batch.
        cancel: Optional event; once set, the current batch is abandoned.

    Attributes:
        evaluations: Number of solutions evaluated successfully so far.
        n_obj: Objective count fixed by the first successful batch.

    Example:
        >>> evaluator = Evaluator(lambda x: np.array([x.sum(), (1 - x).sum()]))
        >>> batch = [Solution(x=np.array([0.2, 0.3]))]
        >>> evaluator(batch)
        >>> batch[0].objectives
        array([0.5, 1.5])
    """

    def __init__(
        self,
        evaluate: Callable[[np.ndarray], Any],
        n_workers: int = 1,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        if not callable(evaluate):
            raise ConfigurationError(f"evaluate must be callable, got {type(evaluate).__name__}")
        if n_workers < 1 and n_workers != -1:
            raise ConfigurationError(f"n_workers must be positive or -1 (all cores), got {n_workers}")
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")
        self.evaluate = evaluate
        self.n_workers = n_workers
        self.timeout = timeout
        self.cancel = cancel
        self.evaluations = 0
        self.n_obj: int | None = None

    def __call__(self, solutions: Sequence[Solution]) -> None:
        """Evaluate every solution in the batch.

        Raises:
            EvaluationError: If evaluate raised or returned invalid values.
            EvaluationTimeout: If the batch exceeded the timeout.
            EvaluationCancelled: If the cancel event was set.
        """
        if len(solutions) == 0:
            return

        self._check_cancelled()
        outputs = self._run([s.x for s in solutions])
        self._check_cancelled()

        n_obj = self.n_obj
        results: list[tuple[np.ndarray, float]] = []
        for i, output in enumerate(outputs):
            objectives, violation = self._validate(i, output)
            if n_obj is None:
                n_obj = objectives.shape[0]
            elif objectives.shape[0] != n_obj:
                raise EvaluationError(
                    f"solution {i} returned {objectives.shape[0]} objectives, expected {n_obj}"
                )
            results.append((objectives, violation))

        for solution, (objectives, violation) in zip(solutions, results):
            solution.assign_evaluation(objectives, violation)
        self.n_obj = n_obj
        self.evaluations += len(solutions)
        logger.debug("evaluated batch of %d solutions", len(solutions))

    def _run(self, xs: list[np.ndarray]) -> list[Any]:
        try:
            if self.n_workers == 1:
                return self._run_sequential(xs)
            return Parallel(n_jobs=self.n_workers, timeout=self.timeout)(delayed(self.evaluate)(x) for x in xs)
        except EvaluationError:
            raise
        except (TimeoutError, multiprocessing.TimeoutError) as e:
            raise EvaluationTimeout(f"evaluation batch exceeded timeout of {self.timeout}s") from e
        except Exception as e:
            raise EvaluationError(f"evaluation failed: {e}") from e

    def _run_sequential(self, xs: list[np.ndarray]) -> list[Any]:
        start = time.monotonic()
        outputs = []
        for x in xs:
            self._check_cancelled()
            if self.timeout is not None and time.monotonic() - start > self.timeout:
                raise EvaluationTimeout(f"evaluation batch exceeded timeout of {self.timeout}s")
            outputs.append(self.evaluate(x))
        return outputs

    def _check_cancelled(self) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise EvaluationCancelled("evaluation batch was cancelled")

    @staticmethod
    def _validate(i: int, output: Any) -> tuple[np.ndarray, float]:
        if isinstance(output, tuple):
            if len(output) != 2:
                raise EvaluationError(
                    f"solution {i}: expected (objectives, violation) tuple, got {len(output)} items"
                )
            raw_objectives, raw_violation = output
            if np.ndim(raw_objectives) == 0:
                raise EvaluationError(
                    f"solution {i}: tuple output must be (objectives, violation) with an objective "
                    f"array, got a scalar {raw_objectives} as objectives",
                    suggestion="Return objectives as an array, e.g. np.array([f1, f2]); "
                    "constrained single-objective problems return ([f], violation).",
                )
        else:
            raw_objectives, raw_violation = output, 0.0

        try:
            objectives = np.atleast_1d(np.asarray(raw_objectives, dtype=np.float64))
            violation = float(raw_violation)
        except (TypeError, ValueError) as e:
            raise EvaluationError(f"solution {i}: evaluation returned non-numeric values") from e

        if objectives.ndim != 1:
            raise EvaluationError(f"solution {i}: objectives must be 1D, got shape {objectives.shape}")
        if not np.all(np.isfinite(objectives)):
            raise EvaluationError(
                f"solution {i}: non-finite objective values {objectives.tolist()}",
                suggestion="The objective function must return finite numbers for every input.",
            )
        if not np.isfinite(violation) or violation < 0:
            raise EvaluationError(f"solution {i}: constraint violation must be finite and >= 0, got {violation}")
        return objectives, violation
