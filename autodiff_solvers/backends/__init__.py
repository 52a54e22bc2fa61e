"""
Solver backends for autodiff-solvers.

Each backend is a BaseSolver subclass that answers feasibility and
assignment queries over groups of ProblemDescriptors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autodiff_solvers.backends.base import BaseSolver

# Registry of available backends
_BACKENDS: dict[str, type["BaseSolver"] | None] = {}

# Backends shipped with the package
KNOWN_BACKENDS = ("dummy", "z3")


def register_backend(name: str, backend_class: type["BaseSolver"]) -> None:
    """Register a backend class."""
    _BACKENDS[name.lower()] = backend_class


def get_backend(name: str) -> type["BaseSolver"] | None:
    """
    Get a backend class by name.

    Returns None if the backend is not available (dependencies not installed).
    """
    name_lower = name.lower()

    # Lazy load backends to avoid import errors when deps missing
    if name_lower not in _BACKENDS:
        _try_load_backend(name_lower)

    return _BACKENDS.get(name_lower)


def _try_load_backend(name: str) -> None:
    """Try to load a backend, catching import errors."""
    if name == "dummy":
        from autodiff_solvers.backends.dummy_backend import DummySolver
        _BACKENDS["dummy"] = DummySolver

    elif name == "z3":
        try:
            from autodiff_solvers.backends.z3_backend import Z3Solver
            _BACKENDS["z3"] = Z3Solver
        except ImportError:
            _BACKENDS["z3"] = None


def available_backends() -> list[str]:
    """Return list of available backend names."""
    # Try loading all known backends
    for name in KNOWN_BACKENDS:
        if name not in _BACKENDS:
            _try_load_backend(name)

    return [name for name, cls in _BACKENDS.items() if cls is not None]


__all__ = ["get_backend", "register_backend", "available_backends", "KNOWN_BACKENDS"]
