from __future__ import annotations

import math
from typing import TYPE_CHECKING, Mapping

from autodiff_solvers.terms import Term, Variable, holds
from autodiff_solvers.visitors.base import MemoizingVisitor

if TYPE_CHECKING:
    from autodiff_solvers.terms import (
        Abs,
        And,
        Constant,
        Cos,
        Exp,
        Log,
        LTConstraint,
        LTEConstraint,
        Max,
        Min,
        Not,
        Or,
        Power,
        Product,
        Reification,
        Sin,
        Sum,
        TermPower,
    )


def _normalize(assignment: Mapping) -> dict[int, float]:
    """Accept Variables or plain ids as keys."""
    return {
        (key.id if isinstance(key, Variable) else int(key)): float(value)
        for key, value in assignment.items()
    }


class Evaluator(MemoizingVisitor):
    """Evaluate a term graph under a variable assignment."""

    def __init__(self, assignment: Mapping):
        super().__init__()
        self.assignment = _normalize(assignment)

    def visit_constant(self, term: Constant) -> float:
        return term.value

    def visit_variable(self, term: Variable) -> float:
        if term.id not in self.assignment:
            raise KeyError(f"No value assigned to variable {term.id}")
        return self.assignment[term.id]

    def visit_sum(self, term: Sum) -> float:
        return math.fsum(self.visit(t) for t in term.terms)

    def visit_product(self, term: Product) -> float:
        return self.visit(term.left) * self.visit(term.right)

    def visit_power(self, term: Power) -> float:
        return math.pow(self.visit(term.base), term.exponent)

    def visit_term_power(self, term: TermPower) -> float:
        return math.pow(self.visit(term.base), self.visit(term.exponent))

    def visit_sin(self, term: Sin) -> float:
        return math.sin(self.visit(term.arg))

    def visit_cos(self, term: Cos) -> float:
        return math.cos(self.visit(term.arg))

    def visit_exp(self, term: Exp) -> float:
        return math.exp(self.visit(term.arg))

    def visit_log(self, term: Log) -> float:
        return math.log(self.visit(term.arg))

    def visit_abs(self, term: Abs) -> float:
        return abs(self.visit(term.arg))

    def visit_max(self, term: Max) -> float:
        return max(self.visit(term.left), self.visit(term.right))

    def visit_min(self, term: Min) -> float:
        return min(self.visit(term.left), self.visit(term.right))

    def visit_lt(self, term: LTConstraint) -> float:
        return 1.0 if self.visit(term.left) < self.visit(term.right) else 0.0

    def visit_lte(self, term: LTEConstraint) -> float:
        return 1.0 if self.visit(term.left) <= self.visit(term.right) else 0.0

    def visit_and(self, term: And) -> float:
        left = holds(self.visit(term.left))
        return 1.0 if left and holds(self.visit(term.right)) else 0.0

    def visit_or(self, term: Or) -> float:
        left = holds(self.visit(term.left))
        return 1.0 if left or holds(self.visit(term.right)) else 0.0

    def visit_not(self, term: Not) -> float:
        return 0.0 if holds(self.visit(term.arg)) else 1.0

    def visit_reification(self, term: Reification) -> float:
        return term.max if holds(self.visit(term.condition)) else term.min


def evaluate(term: Term, assignment: Mapping) -> float:
    """Evaluate term with {variable or id: value}."""
    return Evaluator(assignment).visit(term)
