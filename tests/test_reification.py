"""
Tests for autodiff_solvers.terms.reification.

These tests verify:
- Accessors and lazy negation
- Caching of the negated condition, including concurrent first access
- Folding and differentiation
- The value contract (within [min, max] whenever the condition holds)
"""

import threading

import pytest

from autodiff_solvers.terms import (
    TRUE,
    And,
    Constant,
    LTEConstraint,
    Reification,
    Term,
    le,
    lt,
)
from autodiff_solvers.visitors import TermVisitor, evaluate


class CountingCondition(Term):
    """Condition wrapper that counts negate() calls."""

    def __init__(self, inner):
        self.inner = inner
        self.negations = 0

    def accept(self, visitor):
        return self.inner.accept(visitor)

    def aggregate_constants(self):
        return self

    def derivative(self, v):
        return self.inner.derivative(v)

    def negate(self):
        self.negations += 1
        return self.inner.negate()


class TestAccessors:
    """Test constructor and read accessors."""

    def test_stores_arguments(self, x, y):
        """condition, min and max are stored as given."""
        cond = lt(x, y)
        r = Reification(cond, 2, 5)
        assert r.condition is cond
        assert r.get_condition() is cond
        assert r.min == 2.0 and r.get_min() == 2.0
        assert r.max == 5.0 and r.get_max() == 5.0

    def test_negation_is_lazy(self, x, y):
        """The constructor does not negate the condition."""
        cond = CountingCondition(lt(x, y))
        Reification(cond, 2, 5)
        assert cond.negations == 0

    def test_negated_condition_structure(self, x, y):
        """The negation of x < y is y <= x over the same variables."""
        r = Reification(lt(x, y), 2, 5)
        negated = r.negated_condition
        assert isinstance(negated, LTEConstraint)
        assert negated.left is y and negated.right is x


class TestNegationCache:
    """Test that the negated condition is computed once."""

    def test_repeated_access_returns_same_object(self, x, y):
        """getNegatedCondition() twice gives the identical term."""
        r = Reification(lt(x, y) & le(y, 3), 2, 5)
        first = r.get_negated_condition()
        second = r.get_negated_condition()
        assert first is second
        assert r.negated_condition is first

    def test_single_computation(self, x, y):
        """negate() runs once however often the negation is read."""
        cond = CountingCondition(lt(x, y))
        r = Reification(cond, 2, 5)
        for _ in range(5):
            r.negated_condition
        assert cond.negations == 1

    def test_concurrent_first_access(self, x, y):
        """Threads racing on first access all see one negation."""
        cond = CountingCondition(lt(x, y))
        r = Reification(cond, 2, 5)
        seen = []
        barrier = threading.Barrier(8)

        def read():
            barrier.wait()
            seen.append(r.negated_condition)

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cond.negations == 1
        assert all(s is seen[0] for s in seen)

    def test_negation_is_complement(self, x, y, z, assignments):
        """The cached negation evaluates to the complement of the condition."""
        r = Reification(lt(x, y) | le(z, 1), 2, 5)
        for point in assignments:
            holds = evaluate(r.condition, point) > 0
            assert (evaluate(r.negated_condition, point) > 0) is (not holds)


class TestTransformations:
    """Test aggregate_constants() and derivative()."""

    def test_fold_returns_new_reification(self, x, y):
        """Folding builds a new Reification with folded condition."""
        r = Reification(And(TRUE, lt(x, y)), 2, 5)
        folded = r.aggregate_constants()
        assert folded is not r
        assert isinstance(folded, Reification)
        assert str(folded.condition) == "(x < y)"
        assert (folded.min, folded.max) == (2.0, 5.0)

    def test_fold_leaves_negation_lazy(self, x, y):
        """Without a cached negation, the folded copy negates on demand."""
        cond = CountingCondition(lt(x, y))
        Reification(cond, 2, 5).aggregate_constants()
        assert cond.negations == 0

    def test_fold_carries_cached_negation(self, x, y):
        """A cached negation is folded into the new instance."""
        r = Reification(And(TRUE, lt(x, y)), 2, 5)
        r.negated_condition
        folded = r.aggregate_constants()
        assert folded._negated_condition is not None
        assert str(folded.negated_condition) == "(y <= x)"

    def test_fold_does_not_touch_original(self, x, y):
        """The original keeps its unfolded condition."""
        r = Reification(And(TRUE, lt(x, y)), 2, 5)
        r.aggregate_constants()
        assert isinstance(r.condition, And)

    def test_derivative_is_zero(self, x, y):
        """The derivative is the constant 0."""
        d = Reification(lt(x, y), 2, 5).derivative(y)
        assert isinstance(d, Constant)
        assert d.value == 0.0


class TestValueContract:
    """Test the guarded interval semantics."""

    def test_within_bounds_when_condition_holds(self, x, y, assignments):
        """Whenever the condition holds the value lies in [2, 5]."""
        r = Reification(lt(x, y), 2, 5)
        checked = 0
        for point in assignments:
            if evaluate(r.condition, point) > 0:
                assert 2.0 <= evaluate(r, point) <= 5.0
                checked += 1
        assert checked > 0

    def test_takes_bounds(self, x, y):
        """max while the condition holds, min otherwise."""
        r = Reification(lt(x, y), 2, 5)
        assert evaluate(r, {0: 1.0, 1: 2.0}) == 5.0
        assert evaluate(r, {0: 2.0, 1: 1.0}) == 2.0

    def test_visitor_dispatch(self, x, y):
        """accept() calls visit_reification."""

        class Recorder(TermVisitor):
            def visit_reification(self, term):
                return ("reification", term.min, term.max)

        r = Reification(lt(x, y), 2, 5)
        assert Recorder().visit(r) == ("reification", 2.0, 5.0)

    def test_printed_form(self, x, y):
        """Printer renders the condition and bounds."""
        assert str(Reification(lt(x, y), 2, 5)) == "reify((x < y), 2, 5)"


def test_unvisited_kind_raises(x):
    """A visitor without a matching method raises NotImplementedError."""
    with pytest.raises(NotImplementedError, match="TermVisitor does not handle Reification"):
        TermVisitor().visit(Reification(lt(x, 1), 0, 1))
