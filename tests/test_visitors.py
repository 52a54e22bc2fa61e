"""
Tests for autodiff_solvers.visitors.

These tests verify:
- Evaluator results and missing-variable errors
- Printer output
- Variable collection
- Tape compilation (integer indices, shared nodes, evaluation)
"""

import math

import pytest

from autodiff_solvers.terms import (
    Abs,
    Constant,
    Cos,
    Exp,
    Log,
    Max,
    Min,
    Not,
    Power,
    Reification,
    Sin,
    TermPower,
    Variable,
    le,
    lt,
)
from autodiff_solvers.visitors import (
    Evaluator,
    MemoizingVisitor,
    TermCompiler,
    TermPrinter,
    TermVisitor,
    collect_variables,
    compile_term,
    evaluate,
)


class TestEvaluator:
    """Test evaluation of every kind."""

    def test_arithmetic(self, x, y):
        """Arithmetic kinds evaluate with the usual semantics."""
        point = {0: 2.0, 1: 3.0}
        assert evaluate(x + y, point) == 5.0
        assert evaluate(x * y, point) == 6.0
        assert evaluate(Power(x, 3), point) == 8.0
        assert evaluate(TermPower(x, y), point) == 8.0
        assert evaluate(Max(x, y), point) == 3.0
        assert evaluate(Min(x, y), point) == 2.0
        assert evaluate(Abs(x - y), point) == 1.0

    def test_functions(self, x):
        """Transcendental kinds use the math module."""
        point = {0: 0.5}
        assert evaluate(Sin(x), point) == pytest.approx(math.sin(0.5))
        assert evaluate(Cos(x), point) == pytest.approx(math.cos(0.5))
        assert evaluate(Exp(x), point) == pytest.approx(math.exp(0.5))
        assert evaluate(Log(x), point) == pytest.approx(math.log(0.5))

    def test_booleans(self, x, y):
        """Comparisons and logic evaluate to 1.0 or 0.0."""
        point = {0: 1.0, 1: 2.0}
        assert evaluate(lt(x, y), point) == 1.0
        assert evaluate(lt(y, x), point) == 0.0
        assert evaluate(le(x, 1), point) == 1.0
        assert evaluate(lt(x, y) & lt(y, x), point) == 0.0
        assert evaluate(lt(x, y) | lt(y, x), point) == 1.0
        assert evaluate(Not(lt(y, x)), point) == 1.0

    def test_accepts_variable_keys(self, x, y):
        """Assignments may be keyed by Variable instead of id."""
        assert evaluate(x + y, {x: 1.0, y: 2.0}) == 3.0

    def test_fractional_power_of_negative_raises(self, x):
        """A negative base with a fractional exponent raises ValueError."""
        assert evaluate(Power(x, 3), {0: -2.0}) == -8.0
        with pytest.raises(ValueError):
            evaluate(Power(x, 0.5), {0: -8.0})
        with pytest.raises(ValueError):
            compile_term(Power(x, 0.5), [x]).evaluate([-8.0])

    def test_missing_variable_raises(self, x, y):
        """Unassigned variables raise KeyError naming the id."""
        with pytest.raises(KeyError, match="variable 1"):
            evaluate(x + y, {0: 1.0})

    def test_shared_subterm_visited_once(self, x):
        """A shared node is evaluated once per Evaluator."""
        calls = []

        class CountingEvaluator(Evaluator):
            def visit_product(self, term):
                calls.append(term)
                return super().visit_product(term)

        shared = x * x
        CountingEvaluator({0: 3.0}).visit(shared + shared + Sin(shared))
        assert len(calls) == 1


class TestPrinter:
    """Test infix rendering."""

    def test_arithmetic(self, x, y):
        """Operators render infix with parentheses."""
        assert TermPrinter().visit(x * y + 1) == "((x * y) + 1)"
        assert str(Power(x, 2)) == "(x ** 2)"
        assert str(TermPower(x, y)) == "(x ** y)"
        assert str(-x) == "(-1 * x)"

    def test_functions(self, x, y):
        """Functions render by name."""
        assert str(Sin(x)) == "sin(x)"
        assert str(Max(x, y)) == "max(x, y)"
        assert str(Abs(Constant(0.5))) == "abs(0.5)"

    def test_logic(self, x, y):
        """Logic renders with &, | and ~."""
        assert str(lt(x, y) & le(y, 2)) == "((x < y) & (y <= 2))"
        assert str(~lt(x, y) | lt(y, x)) == "(~(x < y) | (y < x))"

    def test_unnamed_variable(self):
        """Variables without a name print as x<id>."""
        assert str(Variable(12) + 1) == "(x12 + 1)"


class TestCollector:
    """Test variable collection."""

    def test_collects_sorted_distinct(self, x, y, z):
        """Variables are deduplicated by id and sorted."""
        t = z * x + Sin(x) + Reification(lt(y, Variable(0)), 0, 1)
        assert [v.id for v in collect_variables(t)] == [0, 1, 2]

    def test_multiple_terms_and_none(self, x, y):
        """Several roots are merged and None is skipped."""
        assert collect_variables(x + 1, None, y * 2) == [x, y]

    def test_constant_has_no_variables(self):
        """Constants contribute nothing."""
        assert collect_variables(Constant(3) + 4) == []


class TestCompiler:
    """Test tape compilation."""

    def test_accept_returns_indices(self, x, y):
        """Visiting returns integer tape indices; the root is last."""
        compiler = TermCompiler([x, y])
        root = compiler.visit(x * y + 1)
        assert isinstance(root, int)
        assert root == len(compiler.tape) - 1
        assert compiler.tape[root].kind == "sum"

    def test_shared_nodes_compiled_once(self, x):
        """A shared subterm gets a single tape entry."""
        shared = Sin(x)
        compiler = TermCompiler([x])
        compiler.visit(shared * shared)
        assert [e.kind for e in compiler.tape].count("sin") == 1

    def test_evaluate_matches_evaluator(self, x, y, z, assignments):
        """Compiled evaluation agrees with the Evaluator."""
        t = Max(x * y, z) + Abs(z - 1) * Cos(y) + Reification(lt(x, z), -1, 3) + Exp(z * 0.2)
        compiled = compile_term(t)
        assert [v.id for v in compiled.variables] == [0, 1, 2]
        for point in assignments:
            assert compiled.evaluate([point[0], point[1], point[2]]) == pytest.approx(
                evaluate(t, point)
            )

    def test_boolean_gradient_is_zero(self, x, y):
        """Comparisons and reifications contribute no gradient."""
        compiled = compile_term(Reification(lt(x, y), 0, 1) + (lt(x, y) & le(y, 4)), [x, y])
        gradient, value = compiled.differentiate([1.0, 2.0])
        assert gradient == [0.0, 0.0]
        assert value == 2.0

    def test_wrong_value_count_raises(self, x, y):
        """The number of values must match the inputs."""
        compiled = compile_term(x + y, [x, y])
        with pytest.raises(ValueError, match="Expected 2 values"):
            compiled.evaluate([1.0])

    def test_unknown_variable_raises(self, x, y):
        """Every variable must be among the compiled inputs."""
        with pytest.raises(KeyError, match="Variable 1"):
            compile_term(x + y, [x])


class TestVisitorBase:
    """Test the dispatch base classes."""

    def test_generic_visit_raises(self, x):
        """Unhandled kinds raise NotImplementedError."""
        with pytest.raises(NotImplementedError, match="does not handle Sum"):
            TermVisitor().visit(x + 1)

    def test_partial_visitor(self, x):
        """A visitor may override generic_visit to cover the rest."""

        class DepthVisitor(MemoizingVisitor):
            def visit_variable(self, term):
                return 1

            def visit_constant(self, term):
                return 1

            def generic_visit(self, term):
                return 1 + max(self.visit(c) for c in term.children())

        assert DepthVisitor().visit(Sin(x * 2) + 1) == 4
