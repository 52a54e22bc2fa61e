"""
autodiff-solvers: symbolic terms and pluggable solvers for online planning.

This package provides an expression graph with constant folding, symbolic
differentiation and reification of logical conditions, plus a solver
abstraction with interchangeable backends (Z3, and an always-failing
reference backend).

Example usage:
    from autodiff_solvers import ProblemDescriptor, get_solver
    from autodiff_solvers.terms import Reification, Variable, lt

    x, y = Variable(0, "x"), Variable(1, "y")
    bonus = Reification(lt(x, y), 2.0, 5.0)
    descriptor = ProblemDescriptor(
        constraint=lt(x, 10) & lt(0, y),
        utility=x + bonus,
        domains={0: (0.0, 20.0), 1: (0.0, 20.0)},
    )

    solver = get_solver("z3")
    results = []
    if solver.get_solution([x, y], [descriptor], results):
        print(results[0].values)
"""

from autodiff_solvers.backends import get_backend
from autodiff_solvers.backends.base import (
    BaseSolver,
    ProblemDescriptor,
    SolverResult,
    SolverVariable,
)
from autodiff_solvers.solver import get_solver, supported_solvers

__version__ = "0.1.0"
__all__ = [
    "get_solver",
    "supported_solvers",
    "get_backend",
    "BaseSolver",
    "ProblemDescriptor",
    "SolverResult",
    "SolverVariable",
]
