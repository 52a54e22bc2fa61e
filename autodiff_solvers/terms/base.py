"""
Base classes of the expression graph.

A Term is an immutable node; compound terms hold references to their
children, and the same child may be shared by several parents. All
transformations (constant folding, differentiation, negation) build new
nodes and leave the receiver untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from numbers import Real
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from autodiff_solvers.visitors.base import TermVisitor


class Term(ABC):
    """
    Abstract base of every expression graph node.

    Subclasses implement:
    1. accept() to dispatch to the matching visit_* method
    2. aggregate_constants() to fold constant subexpressions
    3. derivative() to differentiate with respect to a Variable

    Boolean-valued kinds also override negate().
    """

    @abstractmethod
    def accept(self, visitor: TermVisitor) -> Any:
        """Dispatch to the visitor method for this kind and return its result."""
        raise NotImplementedError

    @abstractmethod
    def aggregate_constants(self) -> Term:
        """Return an equivalent term with constant subexpressions folded."""
        raise NotImplementedError

    @abstractmethod
    def derivative(self, v: Variable) -> Term:
        """Return the partial derivative of this term with respect to v."""
        raise NotImplementedError

    def children(self) -> tuple[Term, ...]:
        """Direct subterms, in evaluation order."""
        return ()

    def negate(self) -> Term:
        """Return the logical complement of this term."""
        from autodiff_solvers.terms.logic import Not

        return Not(self)

    # ========== Graph building ==========

    def __add__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Sum

        return Sum(self, as_term(other))

    def __radd__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Sum

        return Sum(as_term(other), self)

    def __sub__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Sum

        return Sum(self, -as_term(other))

    def __rsub__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Sum

        return Sum(as_term(other), -self)

    def __mul__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Product

        return Product(self, as_term(other))

    def __rmul__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Product

        return Product(as_term(other), self)

    def __truediv__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Power, Product

        return Product(self, Power(as_term(other), -1.0))

    def __rtruediv__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Power, Product

        return Product(as_term(other), Power(self, -1.0))

    def __pow__(self, other: Any) -> Term:
        from autodiff_solvers.terms.arithmetic import Power, TermPower

        if isinstance(other, Real) and not isinstance(other, bool):
            return Power(self, float(other))
        return TermPower(self, as_term(other))

    def __neg__(self) -> Term:
        from autodiff_solvers.terms.arithmetic import Product

        return Product(Constant(-1.0), self)

    def __and__(self, other: Any) -> Term:
        from autodiff_solvers.terms.logic import And

        return And(self, as_term(other))

    def __or__(self, other: Any) -> Term:
        from autodiff_solvers.terms.logic import Or

        return Or(self, as_term(other))

    def __invert__(self) -> Term:
        from autodiff_solvers.terms.logic import Not

        return Not(self)

    def __str__(self) -> str:
        from autodiff_solvers.visitors.printer import TermPrinter

        return TermPrinter().visit(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class Constant(Term):
    """A fixed real value."""

    def __init__(self, value: float):
        self.value = float(value)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_constant(self)

    def aggregate_constants(self) -> Term:
        return self

    def derivative(self, v: Variable) -> Term:
        return ZERO

    def negate(self) -> Term:
        return FALSE if self.value > 0 else TRUE


class Variable(Term):
    """
    A decision quantity identified by a stable integer id.

    Variables with the same id are equal, hash alike and bind to the same
    solver variable, whichever instance a graph happens to reference.
    """

    def __init__(self, variable_id: int, name: str | None = None):
        self.id = int(variable_id)
        self.name = name

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_variable(self)

    def aggregate_constants(self) -> Term:
        return self

    def derivative(self, v: Variable) -> Term:
        return ONE if v.id == self.id else ZERO

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Variable):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Variable", self.id))

    def __repr__(self) -> str:
        if self.name is None:
            return f"Variable({self.id})"
        return f"Variable({self.id}, {self.name!r})"


def as_term(value: Any) -> Term:
    """Lift a plain number to a Constant; pass Terms through."""
    if isinstance(value, Term):
        return value
    if isinstance(value, Real):
        return Constant(float(value))
    raise TypeError(f"Cannot use {type(value).__name__} as a term operand")


def is_constant(term: Term, value: float | None = None) -> bool:
    """True if term is a Constant (optionally with the given value)."""
    if not isinstance(term, Constant):
        return False
    return value is None or term.value == value


ZERO = Constant(0.0)
ONE = Constant(1.0)

# Boolean-valued terms evaluate to 1.0 when they hold and 0.0 otherwise.
TRUE = ONE
FALSE = ZERO
