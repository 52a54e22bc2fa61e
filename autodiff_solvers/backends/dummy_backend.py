"""
Reference backend that never finds a solution.

It satisfies the BaseSolver contract so that dependent code can run end to
end without a real backend. Every query, including one with no variables
and no descriptors, reports False.
"""

from __future__ import annotations

from typing import Sequence

from autodiff_solvers.backends.base import BaseSolver, ProblemDescriptor, SolverResult
from autodiff_solvers.terms import Variable


class DummySolver(BaseSolver):
    """Always-failing backend. create_variable() returns handle-less placeholders."""

    def exists_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
    ) -> bool:
        self._log(1, f"Dummy solver asked for {len(descriptors)} descriptor(s): no solution")
        return False

    def get_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
        results: list[SolverResult],
    ) -> bool:
        self._log(1, f"Dummy solver asked for {len(descriptors)} descriptor(s): no solution")
        return False
