"""
Reification: a logical condition embedded in numeric expressions.

A Reification takes the value ``max`` when its condition holds and ``min``
otherwise, so a constraint system can bound it to ``[min, max]`` under the
condition without branching. Backends that encode both branches of the
disjunction use ``negated_condition``, which is derived once from the
condition and then reused, so both branches always mention the same
variables.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from autodiff_solvers.terms.base import ZERO, Term, Variable

if TYPE_CHECKING:
    from autodiff_solvers.visitors.base import TermVisitor


class Reification(Term):
    """
    Guarded interval over a boolean-valued condition.

    Args:
        condition: Boolean-valued term.
        min: Value while the condition does not hold. Must not exceed max.
        max: Value while the condition holds.
    """

    def __init__(self, condition: Term, min: float, max: float):
        self._condition = condition
        self._negated_condition: Term | None = None
        self._min = float(min)
        self._max = float(max)
        self._lock = threading.Lock()

    @property
    def condition(self) -> Term:
        return self._condition

    @property
    def negated_condition(self) -> Term:
        """The complement of the condition, computed on first access."""
        if self._negated_condition is None:
            with self._lock:
                if self._negated_condition is None:
                    self._negated_condition = self._condition.negate()
        return self._negated_condition

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    def get_condition(self) -> Term:
        return self.condition

    def get_negated_condition(self) -> Term:
        return self.negated_condition

    def get_min(self) -> float:
        return self._min

    def get_max(self) -> float:
        return self._max

    def children(self) -> tuple[Term, ...]:
        return (self._condition,)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_reification(self)

    def aggregate_constants(self) -> Term:
        folded = Reification(self._condition.aggregate_constants(), self._min, self._max)
        if self._negated_condition is not None:
            folded._negated_condition = self._negated_condition.aggregate_constants()
        return folded

    def derivative(self, v: Variable) -> Term:
        # a bound switched by a condition is flat almost everywhere
        return ZERO
