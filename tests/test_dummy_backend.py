"""Tests for the always-failing reference backend."""

from autodiff_solvers import get_solver
from autodiff_solvers.backends.base import ProblemDescriptor, SolverResult
from autodiff_solvers.backends.dummy_backend import DummySolver
from autodiff_solvers.terms import TRUE, lt


class TestDummySolver:
    """DummySolver reports no solution for every query."""

    def test_exists_solution_false(self, x, y):
        """A satisfiable query still reports False."""
        d = ProblemDescriptor(constraint=lt(x, y))
        assert DummySolver().exists_solution([x, y], [d]) is False

    def test_empty_query_false(self):
        """Even the vacuous query reports False."""
        assert DummySolver().exists_solution([], []) is False

    def test_get_solution_false(self, x):
        """get_solution() fails and leaves results untouched."""
        sentinel = SolverResult(ProblemDescriptor(), {0: 1.0})
        results = [sentinel]
        d = ProblemDescriptor(constraint=TRUE, utility=x)
        assert DummySolver().get_solution([x], [d], results) is False
        assert results == [sentinel]

    def test_get_solution_adds_no_handles(self):
        """An empty results list stays empty."""
        results = []
        assert DummySolver().get_solution([], [], results) is False
        assert results == []

    def test_create_variable_placeholder(self):
        """create_variable() returns a cached, handle-less placeholder."""
        solver = DummySolver()
        sv = solver.create_variable(7)
        assert sv.variable_id == 7
        assert sv.handle is None
        assert solver.create_variable(7) is sv

    def test_does_not_mutate_inputs(self, x, y):
        """Queries leave variables and descriptors untouched."""
        d = ProblemDescriptor(constraint=lt(x, y), domains={0: (0.0, 1.0)})
        variables = [x, y]
        DummySolver().exists_solution(variables, [d])
        assert variables == [x, y]
        assert d.domains == {0: (0.0, 1.0)}

    def test_available_through_get_solver(self):
        """The registry hands out DummySolver for 'dummy'."""
        assert isinstance(get_solver("dummy"), DummySolver)

    def test_logs_outcome(self, capsys):
        """Verbosity 1 reports the (negative) outcome."""
        DummySolver(verbose=1).exists_solution([], [])
        assert "no solution" in capsys.readouterr().out
