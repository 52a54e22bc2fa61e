"""
Base class for solver backends.

Planning code programs against BaseSolver: it groups the Variables it cares
about with the ProblemDescriptors contributed by each requester, and asks
either whether a solution exists or for a concrete assignment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from autodiff_solvers.terms import Term, Variable
from autodiff_solvers.visitors import collect_variables


@dataclass
class ProblemDescriptor:
    """
    One requester's contribution to a combined query.

    Attributes:
        constraint: Boolean-valued term that must hold (None for no constraint)
        utility: Term to maximize (None for a pure feasibility problem)
        domains: Bounds per variable id, as (lower, upper)
        name: Label used to attribute results and log lines to the requester
    """

    constraint: Term | None = None
    utility: Term | None = None
    domains: dict[int, tuple[float, float]] = field(default_factory=dict)
    name: str = ""

    def variables(self) -> list[Variable]:
        """Variables mentioned by the constraint or the utility, sorted by id."""
        return collect_variables(self.constraint, self.utility)


@dataclass(frozen=True)
class SolverVariable:
    """Backend-side representation bound to one logical variable id."""

    variable_id: int
    handle: Any = field(default=None, compare=False)


@dataclass
class SolverResult:
    """
    Result handle for one descriptor of a successful get_solution() call.

    Attributes:
        descriptor: The descriptor this result answers
        values: Assignment {variable_id: value} for the descriptor's variables
            and the queried variable group
        utility: Value of the descriptor's utility, or None without one
    """

    descriptor: ProblemDescriptor
    values: dict[int, float]
    utility: float | None = None


class BaseSolver(ABC):
    """
    Base class for solver backends.

    Subclasses should:
    1. Implement exists_solution() for feasibility queries
    2. Implement get_solution() to fill one SolverResult per descriptor
    3. Override _make_handle() to build their native variable representation

    Neither query raises for a well-formed input: infeasibility and backend
    faults are both reported as False. A False answer means no solution was
    found, not that none exists.

    Attributes:
        vars: Mapping from variable id to SolverVariable, filled on demand
        time_limit: Time limit in seconds (None for no limit)
        verbose: Verbosity level
        options: Backend-specific options string ("key=value,key=value")
    """

    def __init__(
        self,
        time_limit: float | None = None,
        verbose: int = 0,
        options: str = "",
    ):
        self.time_limit = time_limit
        self.verbose = verbose
        self.options = options

        # Variable mapping: variable id -> solver variable
        self.vars: dict[int, SolverVariable] = {}

    # ========== Abstract methods to implement ==========

    @abstractmethod
    def exists_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
    ) -> bool:
        """Return True if an assignment satisfying all descriptors was found."""
        raise NotImplementedError

    @abstractmethod
    def get_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
        results: list[SolverResult],
    ) -> bool:
        """
        Search for an assignment satisfying all descriptors.

        On success, results is replaced by one SolverResult per descriptor,
        in the same order, and True is returned. On failure False is
        returned and results must not be read.
        """
        raise NotImplementedError

    # ========== Variables ==========

    def create_variable(self, variable_id: int) -> SolverVariable:
        """Return the SolverVariable for variable_id, creating it if absent."""
        variable_id = int(variable_id)
        if variable_id not in self.vars:
            self.vars[variable_id] = SolverVariable(variable_id, self._make_handle(variable_id))
            self._log(2, f"Created solver variable for {variable_id}")
        return self.vars[variable_id]

    def _make_handle(self, variable_id: int) -> Any:
        """Native representation of a new variable; None for no backend model."""
        return None

    # ========== Utility methods ==========

    def _log(self, level: int, msg: str) -> None:
        """Log message if verbosity is high enough."""
        if self.verbose >= level:
            print(msg)

    def _parse_options(self) -> dict[str, Any]:
        """Parse the options string into {key: value}, coercing bools and numbers."""
        parsed: dict[str, Any] = {}
        for item in self.options.split(","):
            item = item.strip()
            if not item:
                continue
            if "=" not in item:
                raise ValueError(f"Malformed solver option (expected key=value): {item}")
            key, raw = (part.strip() for part in item.split("=", 1))
            parsed[key] = _coerce_option(raw)
        return parsed

    @staticmethod
    def _query_variables(
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
    ) -> list[Variable]:
        """Union of the queried group and every descriptor's variables, by id."""
        merged: dict[int, Variable] = {v.id: v for v in variables}
        for descriptor in descriptors:
            for v in descriptor.variables():
                merged.setdefault(v.id, v)
        return [merged[k] for k in sorted(merged)]


def _coerce_option(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw
