"""
Comparison and logical term kinds.

These terms evaluate to TRUE (1.0) or FALSE (0.0). They are piecewise
constant, so their derivative is zero everywhere it exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from autodiff_solvers.terms.base import FALSE, TRUE, ZERO, Term, Variable, as_term, is_constant

if TYPE_CHECKING:
    from autodiff_solvers.visitors.base import TermVisitor


def holds(value: float) -> bool:
    """Truth of an evaluated boolean-valued term."""
    return value > 0.0


def _truth(flag: bool) -> Term:
    return TRUE if flag else FALSE


def _as_condition(term: Term) -> Term:
    """Return term in a form that evaluates to exactly 1.0 or 0.0."""
    if isinstance(term, (_Comparison, And, Or, Not)):
        return term
    if is_constant(term):
        return _truth(holds(term.value))
    return LTConstraint(ZERO, term)


class _Comparison(Term):
    """Ordering between two arithmetic terms."""

    def __init__(self, left: Term, right: Term):
        self.left = left
        self.right = right

    def children(self) -> tuple[Term, ...]:
        return (self.left, self.right)

    def derivative(self, v: Variable) -> Term:
        return ZERO

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        if is_constant(left) and is_constant(right):
            return _truth(self.compare(left.value, right.value))
        return type(self)(left, right)

    @staticmethod
    def compare(left: float, right: float) -> bool:
        raise NotImplementedError


class LTConstraint(_Comparison):
    """left < right"""

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_lt(self)

    @staticmethod
    def compare(left: float, right: float) -> bool:
        return left < right

    def negate(self) -> Term:
        return LTEConstraint(self.right, self.left)


class LTEConstraint(_Comparison):
    """left <= right"""

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_lte(self)

    @staticmethod
    def compare(left: float, right: float) -> bool:
        return left <= right

    def negate(self) -> Term:
        return LTConstraint(self.right, self.left)


class And(Term):
    def __init__(self, left: Term, right: Term):
        self.left = left
        self.right = right

    def children(self) -> tuple[Term, ...]:
        return (self.left, self.right)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_and(self)

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        for this, other in ((left, right), (right, left)):
            if is_constant(this):
                return _as_condition(other) if holds(this.value) else FALSE
        return And(left, right)

    def derivative(self, v: Variable) -> Term:
        return ZERO

    def negate(self) -> Term:
        return Or(self.left.negate(), self.right.negate())


class Or(Term):
    def __init__(self, left: Term, right: Term):
        self.left = left
        self.right = right

    def children(self) -> tuple[Term, ...]:
        return (self.left, self.right)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_or(self)

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        for this, other in ((left, right), (right, left)):
            if is_constant(this):
                return TRUE if holds(this.value) else _as_condition(other)
        return Or(left, right)

    def derivative(self, v: Variable) -> Term:
        return ZERO

    def negate(self) -> Term:
        return And(self.left.negate(), self.right.negate())


class Not(Term):
    def __init__(self, arg: Term):
        self.arg = arg

    def children(self) -> tuple[Term, ...]:
        return (self.arg,)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_not(self)

    def aggregate_constants(self) -> Term:
        arg = self.arg.aggregate_constants()
        if is_constant(arg):
            return arg.negate()
        return Not(arg)

    def derivative(self, v: Variable) -> Term:
        return ZERO

    def negate(self) -> Term:
        return self.arg


def lt(left: Any, right: Any) -> LTConstraint:
    return LTConstraint(as_term(left), as_term(right))


def le(left: Any, right: Any) -> LTEConstraint:
    return LTEConstraint(as_term(left), as_term(right))


def gt(left: Any, right: Any) -> LTConstraint:
    return LTConstraint(as_term(right), as_term(left))


def ge(left: Any, right: Any) -> LTEConstraint:
    return LTEConstraint(as_term(right), as_term(left))
