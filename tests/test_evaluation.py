"""Tests for batch evaluation."""

import threading
import time

import numpy as np
import pytest

from eps_nsga import (
    ConfigurationError,
    EvaluationCancelled,
    EvaluationError,
    EvaluationTimeout,
    Evaluator,
    Solution,
)


def sum_objectives(x: np.ndarray) -> np.ndarray:
    return np.array([x.sum(), (1 - x).sum()])


def sleepy_objectives(x: np.ndarray) -> np.ndarray:
    time.sleep(2.0)
    return sum_objectives(x)


def _batch(n: int) -> list[Solution]:
    return [Solution(x=np.full(2, i / 10)) for i in range(n)]


class TestEvaluatorConfiguration:
    """Tests for Evaluator construction."""

    def test_rejects_non_callable(self) -> None:
        """evaluate must be callable."""
        with pytest.raises(ConfigurationError, match="evaluate must be callable"):
            Evaluator("not a function")

    @pytest.mark.parametrize("n_workers", [0, -2])
    def test_rejects_invalid_workers(self, n_workers: int) -> None:
        """Only positive worker counts or -1 are allowed."""
        with pytest.raises(ConfigurationError, match="n_workers must be positive or -1"):
            Evaluator(sum_objectives, n_workers=n_workers)

    def test_rejects_non_positive_timeout(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(ConfigurationError, match="timeout must be positive"):
            Evaluator(sum_objectives, timeout=0)


class TestEvaluatorBatch:
    """Tests for evaluating batches."""

    def test_assigns_objectives(self) -> None:
        """Every solution receives its objective vector."""
        batch = _batch(3)
        evaluator = Evaluator(sum_objectives)
        evaluator(batch)

        for s in batch:
            np.testing.assert_allclose(s.objectives, sum_objectives(s.x))
            assert s.constraint_violation == 0.0
        assert evaluator.evaluations == 3
        assert evaluator.n_obj == 2

    def test_tuple_output_sets_violation(self) -> None:
        """(objectives, violation) tuples set the constraint violation."""
        batch = _batch(2)
        Evaluator(lambda x: (sum_objectives(x), float(x[0])))(batch)
        assert batch[1].constraint_violation == pytest.approx(0.1)

    def test_bare_objective_tuple_rejected(self) -> None:
        """``return f1, f2`` is not mistaken for one objective plus a violation."""
        batch = [Solution(x=np.array([0.5]))]
        with pytest.raises(EvaluationError, match="got a scalar 0.5 as objectives") as exc_info:
            Evaluator(lambda x: (x[0], x[0] + 1))(batch)
        assert "np.array([f1, f2])" in str(exc_info.value)
        assert batch[0].objectives is None

    def test_single_objective_with_violation(self) -> None:
        """Constrained single-objective problems wrap the objective in a sequence."""
        batch = [Solution(x=np.array([0.5]))]
        Evaluator(lambda x: ([x[0]], x[0] + 1))(batch)
        np.testing.assert_array_equal(batch[0].objectives, [0.5])
        assert batch[0].constraint_violation == pytest.approx(1.5)

    def test_scalar_objective_promoted(self) -> None:
        """A scalar return becomes a one-objective vector."""
        batch = _batch(1)
        Evaluator(lambda x: 3.0)(batch)
        np.testing.assert_array_equal(batch[0].objectives, [3.0])

    def test_empty_batch_is_noop(self) -> None:
        """Evaluating nothing calls nothing."""
        evaluator = Evaluator(sum_objectives)
        evaluator([])
        assert evaluator.evaluations == 0

    def test_rejects_non_finite_objectives(self) -> None:
        """NaN or infinite objectives fail the whole batch."""
        batch = _batch(3)

        def evaluate(x):
            return np.array([np.nan, 1.0]) if x[0] > 0.15 else sum_objectives(x)

        with pytest.raises(EvaluationError, match="non-finite objective values"):
            Evaluator(evaluate)(batch)
        assert all(s.objectives is None for s in batch)

    def test_rejects_negative_violation(self) -> None:
        """Violations below zero are invalid."""
        with pytest.raises(EvaluationError, match="constraint violation must be finite and >= 0"):
            Evaluator(lambda x: (sum_objectives(x), -1.0))(_batch(1))

    def test_rejects_inconsistent_objective_counts(self) -> None:
        """All solutions must return the same number of objectives."""
        batch = _batch(3)

        def evaluate(x):
            return np.zeros(3) if x[0] > 0.15 else np.zeros(2)

        with pytest.raises(EvaluationError, match="returned 3 objectives, expected 2"):
            Evaluator(evaluate)(batch)
        assert all(s.objectives is None for s in batch)

    def test_objective_count_fixed_across_batches(self) -> None:
        """The first batch fixes the objective count."""
        evaluator = Evaluator(sum_objectives)
        evaluator(_batch(1))
        evaluator.evaluate = lambda x: np.zeros(3)
        with pytest.raises(EvaluationError, match="expected 2"):
            evaluator(_batch(1))

    def test_failure_is_all_or_nothing(self) -> None:
        """An exception in one evaluation leaves every solution unevaluated."""
        batch = _batch(4)

        def evaluate(x):
            if x[0] > 0.25:
                raise RuntimeError("boom")
            return sum_objectives(x)

        evaluator = Evaluator(evaluate)
        with pytest.raises(EvaluationError, match="evaluation failed: boom") as exc_info:
            evaluator(batch)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert all(s.objectives is None for s in batch)
        assert evaluator.evaluations == 0

    def test_parallel_matches_sequential(self) -> None:
        """joblib workers produce the same objectives as sequential evaluation."""
        sequential = _batch(6)
        parallel = _batch(6)
        Evaluator(sum_objectives)(sequential)
        Evaluator(sum_objectives, n_workers=2)(parallel)

        for a, b in zip(sequential, parallel):
            np.testing.assert_allclose(a.objectives, b.objectives)


class TestEvaluatorInterruption:
    """Tests for timeout and cancellation."""

    def test_cancelled_before_start(self) -> None:
        """A set event aborts the batch before any evaluation."""
        calls = []
        cancel = threading.Event()
        cancel.set()
        evaluator = Evaluator(lambda x: calls.append(x) or sum_objectives(x), cancel=cancel)

        with pytest.raises(EvaluationCancelled, match="cancelled"):
            evaluator(_batch(3))
        assert calls == []

    def test_cancelled_mid_batch(self) -> None:
        """Setting the event during a batch discards the batch."""
        cancel = threading.Event()
        batch = _batch(3)

        def evaluate(x):
            cancel.set()
            return sum_objectives(x)

        with pytest.raises(EvaluationCancelled):
            Evaluator(evaluate, cancel=cancel)(batch)
        assert all(s.objectives is None for s in batch)

    def test_cancellation_is_evaluation_error(self) -> None:
        """Cancellation can be handled as an evaluation failure."""
        assert issubclass(EvaluationCancelled, EvaluationError)
        assert issubclass(EvaluationTimeout, EvaluationError)

    def test_sequential_timeout(self) -> None:
        """A batch running past its timeout is abandoned."""
        batch = _batch(3)

        def slow(x):
            time.sleep(0.05)
            return sum_objectives(x)

        with pytest.raises(EvaluationTimeout, match="exceeded timeout"):
            Evaluator(slow, timeout=0.01)(batch)
        assert all(s.objectives is None for s in batch)

    def test_parallel_timeout(self) -> None:
        """joblib's per-task timeout surfaces as EvaluationTimeout."""
        batch = _batch(4)
        evaluator = Evaluator(sleepy_objectives, n_workers=2, timeout=0.2)

        with pytest.raises(EvaluationTimeout, match="exceeded timeout of 0.2s"):
            evaluator(batch)

        assert all(s.objectives is None for s in batch)
        assert evaluator.evaluations == 0
