"""Tests for the variation adapters."""

import numpy as np
import pytest

from eps_nsga import CrossoverMutation, MutationOnly, Solution, Variation


class TestCrossoverMutation:
    """Tests for the two-parent adapter."""

    def test_satisfies_protocol(self, averaging_variation: CrossoverMutation) -> None:
        """The adapter is a Variation with arity 2."""
        assert isinstance(averaging_variation, Variation)
        assert averaging_variation.arity == 2

    def test_children_use_both_parent_orders(self) -> None:
        """Crossover runs as (p1, p2) and as (p2, p1)."""
        variation = CrossoverMutation(lambda a, b: a, lambda x: x + 1)
        p1 = Solution(x=np.array([0.0]))
        p2 = Solution(x=np.array([10.0]))

        children = variation.evolve([p1, p2])

        assert [c.x.tolist() for c in children] == [[1.0], [11.0]]

    def test_children_are_unevaluated(self, averaging_variation: CrossoverMutation) -> None:
        """Children come back without objectives or ranking."""
        p1 = Solution(x=np.zeros(2), objectives=np.array([1.0, 1.0]), rank=0)
        p2 = Solution(x=np.ones(2), objectives=np.array([2.0, 0.0]), rank=0)

        for child in averaging_variation.evolve([p1, p2]):
            assert child.objectives is None
            assert child.rank is None

    def test_parents_not_modified(self) -> None:
        """In-place edits by the user functions never reach the parents."""

        def crossover(a, b):
            return a

        def mutate(x):
            x[0] = -1.0
            return x

        p1 = Solution(x=np.array([1.0, 2.0]))
        p2 = Solution(x=np.array([3.0, 4.0]))
        children = CrossoverMutation(crossover, mutate).evolve([p1, p2])

        assert children[0].x[0] == -1.0
        np.testing.assert_array_equal(p1.x, [1.0, 2.0])
        np.testing.assert_array_equal(p2.x, [3.0, 4.0])

    def test_rejects_wrong_parent_count(self, averaging_variation: CrossoverMutation) -> None:
        """Exactly two parents are required."""
        with pytest.raises(ValueError, match="expected 2 parents, got 1"):
            averaging_variation.evolve([Solution(x=np.zeros(1))])


class TestMutationOnly:
    """Tests for the one-parent adapter."""

    def test_single_child(self) -> None:
        """One parent in, one mutated child out."""
        variation = MutationOnly(lambda x: x * 2)
        children = variation.evolve([Solution(x=np.array([1.5]))])

        assert variation.arity == 1
        assert len(children) == 1
        np.testing.assert_array_equal(children[0].x, [3.0])

    def test_rejects_wrong_parent_count(self) -> None:
        """Exactly one parent is required."""
        with pytest.raises(ValueError, match="expected 1 parents, got 2"):
            MutationOnly(lambda x: x).evolve([Solution(x=np.zeros(1)), Solution(x=np.zeros(1))])
