"""
Main get_solver() function for autodiff-solvers.

This module provides the entry point planning code uses to obtain a
configured solver backend by name.
"""

from __future__ import annotations

from autodiff_solvers.backends import KNOWN_BACKENDS, _BACKENDS, get_backend
from autodiff_solvers.backends.base import BaseSolver

DEFAULT_SOLVER = "z3"

# Distribution providing each backend's third-party dependency
BACKEND_PACKAGES = {"z3": "z3-solver"}


def supported_solvers() -> list[str]:
    """Return list of all supported solver names, including registered ones."""
    return sorted(set(KNOWN_BACKENDS) | set(_BACKENDS))


def get_solver(
    name: str = DEFAULT_SOLVER,
    *,
    time_limit: float | None = None,
    verbose: int = 0,
    options: str = "",
) -> BaseSolver:
    """
    Create a solver backend.

    Args:
        name: Backend name - "z3", "dummy", or any registered name
        time_limit: Time limit in seconds per query (None for no limit)
        verbose: Verbosity level (0=quiet, 1=normal, 2=detailed)
        options: Backend-specific options, "key=value" pairs separated by commas

    Returns:
        BaseSolver: a fresh backend instance

    Example:
        from autodiff_solvers import get_solver, ProblemDescriptor
        from autodiff_solvers.terms import Variable, lt

        x = Variable(0, "x")
        solver = get_solver("z3", time_limit=5)
        found = solver.exists_solution([x], [ProblemDescriptor(constraint=lt(x, 3))])
    """
    name_lower = name.lower()
    if name_lower not in supported_solvers():
        raise ValueError(
            f"Unknown solver: {name}. Supported solvers: {supported_solvers()}"
        )

    backend_class = get_backend(name_lower)
    if backend_class is None:
        raise ImportError(
            f"Backend '{name}' is not available. "
            f"Install the required package: pip install {BACKEND_PACKAGES.get(name_lower, name_lower)}"
        )

    return backend_class(time_limit=time_limit, verbose=verbose, options=options)
