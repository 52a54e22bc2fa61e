"""
Visitor base class for term graphs.

Each ``visit_X`` method corresponds to a term kind. The default
implementations call ``generic_visit``, which raises; subclasses override
the kinds they handle, or ``generic_visit`` to cover the rest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

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
        Term,
        TermPower,
        Variable,
    )


class TermVisitor:
    """Double-dispatch base: ``visit(term)`` calls ``term.accept(self)``."""

    def visit(self, term: Term) -> Any:
        """Dispatch to the visit method of term's kind."""
        return term.accept(self)

    def generic_visit(self, term: Term) -> Any:
        raise NotImplementedError(
            f"{type(self).__name__} does not handle {type(term).__name__} terms"
        )

    # ========== Leaves ==========

    def visit_constant(self, term: Constant) -> Any:
        return self.generic_visit(term)

    def visit_variable(self, term: Variable) -> Any:
        return self.generic_visit(term)

    # ========== Arithmetic ==========

    def visit_sum(self, term: Sum) -> Any:
        return self.generic_visit(term)

    def visit_product(self, term: Product) -> Any:
        return self.generic_visit(term)

    def visit_power(self, term: Power) -> Any:
        return self.generic_visit(term)

    def visit_term_power(self, term: TermPower) -> Any:
        return self.generic_visit(term)

    def visit_sin(self, term: Sin) -> Any:
        return self.generic_visit(term)

    def visit_cos(self, term: Cos) -> Any:
        return self.generic_visit(term)

    def visit_exp(self, term: Exp) -> Any:
        return self.generic_visit(term)

    def visit_log(self, term: Log) -> Any:
        return self.generic_visit(term)

    def visit_abs(self, term: Abs) -> Any:
        return self.generic_visit(term)

    def visit_max(self, term: Max) -> Any:
        return self.generic_visit(term)

    def visit_min(self, term: Min) -> Any:
        return self.generic_visit(term)

    # ========== Comparisons and logic ==========

    def visit_lt(self, term: LTConstraint) -> Any:
        return self.generic_visit(term)

    def visit_lte(self, term: LTEConstraint) -> Any:
        return self.generic_visit(term)

    def visit_and(self, term: And) -> Any:
        return self.generic_visit(term)

    def visit_or(self, term: Or) -> Any:
        return self.generic_visit(term)

    def visit_not(self, term: Not) -> Any:
        return self.generic_visit(term)

    def visit_reification(self, term: Reification) -> Any:
        return self.generic_visit(term)


class MemoizingVisitor(TermVisitor):
    """
    Visitor that visits each distinct node once.

    Shared subterms of a graph are resolved from a cache keyed by node
    identity, so work stays linear in the number of distinct nodes.
    """

    def __init__(self):
        self._cache: dict[int, Any] = {}
        # keeps visited nodes alive so their ids stay unique
        self._seen: list[Term] = []

    def visit(self, term: Term) -> Any:
        key = id(term)
        if key not in self._cache:
            self._cache[key] = term.accept(self)
            self._seen.append(term)
        return self._cache[key]
