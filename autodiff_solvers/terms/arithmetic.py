"""
Arithmetic term kinds.

Folding rules applied by aggregate_constants():
- all-constant operands collapse to a single Constant
- Sum flattens nested sums and merges its constant operands
- Product drops a factor of 1 and collapses a factor of 0
- Power with exponent 1 is its base, with exponent 0 is the constant 1
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from autodiff_solvers.terms.base import ONE, ZERO, Constant, Term, Variable, is_constant

if TYPE_CHECKING:
    from autodiff_solvers.visitors.base import TermVisitor


class Sum(Term):
    """N-ary addition."""

    def __init__(self, *terms: Term):
        if not terms:
            raise ValueError("Sum requires at least one operand")
        self.terms = tuple(terms)

    def children(self) -> tuple[Term, ...]:
        return self.terms

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_sum(self)

    def aggregate_constants(self) -> Term:
        folded: list[Term] = []
        constant = 0.0
        has_constant = False
        for child in self.terms:
            child = child.aggregate_constants()
            parts = child.terms if isinstance(child, Sum) else (child,)
            for part in parts:
                if isinstance(part, Constant):
                    constant += part.value
                    has_constant = True
                else:
                    folded.append(part)
        if not folded:
            return Constant(constant)
        if has_constant and constant != 0.0:
            folded.append(Constant(constant))
        if len(folded) == 1:
            return folded[0]
        return Sum(*folded)

    def derivative(self, v: Variable) -> Term:
        return Sum(*(t.derivative(v) for t in self.terms))


class _BinaryTerm(Term):
    """Shared shape of two-operand kinds."""

    def __init__(self, left: Term, right: Term):
        self.left = left
        self.right = right

    def children(self) -> tuple[Term, ...]:
        return (self.left, self.right)


class Product(_BinaryTerm):
    """Binary multiplication."""

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_product(self)

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        if is_constant(left) and is_constant(right):
            return Constant(left.value * right.value)
        if is_constant(left, 0.0) or is_constant(right, 0.0):
            return ZERO
        if is_constant(left, 1.0):
            return right
        if is_constant(right, 1.0):
            return left
        return Product(left, right)

    def derivative(self, v: Variable) -> Term:
        # product rule
        return Sum(
            Product(self.left, self.right.derivative(v)),
            Product(self.right, self.left.derivative(v)),
        )


class Power(Term):
    """
    A term raised to a constant exponent.

    A negative base needs an integral exponent; otherwise evaluation and
    folding raise ValueError.
    """

    def __init__(self, base: Term, exponent: float):
        self.base = base
        self.exponent = float(exponent)

    def children(self) -> tuple[Term, ...]:
        return (self.base,)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_power(self)

    def aggregate_constants(self) -> Term:
        base = self.base.aggregate_constants()
        if self.exponent == 0.0:
            return ONE
        if self.exponent == 1.0:
            return base
        if is_constant(base):
            return Constant(math.pow(base.value, self.exponent))
        return Power(base, self.exponent)

    def derivative(self, v: Variable) -> Term:
        return Product(
            Product(Constant(self.exponent), Power(self.base, self.exponent - 1.0)),
            self.base.derivative(v),
        )


class TermPower(Term):
    """A term raised to a term-valued exponent. The base must stay positive."""

    def __init__(self, base: Term, exponent: Term):
        self.base = base
        self.exponent = exponent

    def children(self) -> tuple[Term, ...]:
        return (self.base, self.exponent)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_term_power(self)

    def aggregate_constants(self) -> Term:
        base = self.base.aggregate_constants()
        exponent = self.exponent.aggregate_constants()
        if is_constant(exponent):
            return Power(base, exponent.value).aggregate_constants()
        return TermPower(base, exponent)

    def derivative(self, v: Variable) -> Term:
        # d(b^e) = b^e * (e' * ln b + e * b' / b)
        return Product(
            self,
            Sum(
                Product(self.exponent.derivative(v), Log(self.base)),
                Product(
                    self.exponent,
                    Product(self.base.derivative(v), Power(self.base, -1.0)),
                ),
            ),
        )


class _UnaryFunction(Term):
    """A named real function applied to one argument."""

    function = staticmethod(lambda x: x)

    def __init__(self, arg: Term):
        self.arg = arg

    def children(self) -> tuple[Term, ...]:
        return (self.arg,)

    def aggregate_constants(self) -> Term:
        arg = self.arg.aggregate_constants()
        if is_constant(arg):
            return Constant(self.function(arg.value))
        return type(self)(arg)

    def derivative(self, v: Variable) -> Term:
        # chain rule
        return Product(self._outer_derivative(), self.arg.derivative(v))

    def _outer_derivative(self) -> Term:
        raise NotImplementedError


class Sin(_UnaryFunction):
    function = staticmethod(math.sin)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_sin(self)

    def _outer_derivative(self) -> Term:
        return Cos(self.arg)


class Cos(_UnaryFunction):
    function = staticmethod(math.cos)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_cos(self)

    def _outer_derivative(self) -> Term:
        return Product(Constant(-1.0), Sin(self.arg))


class Exp(_UnaryFunction):
    function = staticmethod(math.exp)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_exp(self)

    def _outer_derivative(self) -> Term:
        return self


class Log(_UnaryFunction):
    """Natural logarithm."""

    function = staticmethod(math.log)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_log(self)

    def _outer_derivative(self) -> Term:
        return Power(self.arg, -1.0)


class Abs(_UnaryFunction):
    function = staticmethod(abs)

    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_abs(self)

    def _outer_derivative(self) -> Term:
        from autodiff_solvers.terms.logic import LTConstraint
        from autodiff_solvers.terms.reification import Reification

        # sign(arg): 1 when arg > 0, else -1
        return Reification(LTConstraint(ZERO, self.arg), -1.0, 1.0)


class Max(_BinaryTerm):
    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_max(self)

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        if is_constant(left) and is_constant(right):
            return Constant(max(left.value, right.value))
        return Max(left, right)

    def derivative(self, v: Variable) -> Term:
        from autodiff_solvers.terms.logic import LTConstraint
        from autodiff_solvers.terms.reification import Reification

        # right is active when left < right
        return _select(
            Reification(LTConstraint(self.left, self.right), 0.0, 1.0),
            self.right.derivative(v),
            self.left.derivative(v),
        )


class Min(_BinaryTerm):
    def accept(self, visitor: TermVisitor) -> Any:
        return visitor.visit_min(self)

    def aggregate_constants(self) -> Term:
        left = self.left.aggregate_constants()
        right = self.right.aggregate_constants()
        if is_constant(left) and is_constant(right):
            return Constant(min(left.value, right.value))
        return Min(left, right)

    def derivative(self, v: Variable) -> Term:
        from autodiff_solvers.terms.logic import LTConstraint
        from autodiff_solvers.terms.reification import Reification

        # right is active when right < left
        return _select(
            Reification(LTConstraint(self.right, self.left), 0.0, 1.0),
            self.right.derivative(v),
            self.left.derivative(v),
        )


def _select(indicator: Term, when_set: Term, otherwise: Term) -> Term:
    """otherwise + indicator * (when_set - otherwise), for a 0/1 indicator."""
    return Sum(
        otherwise,
        Product(indicator, Sum(when_set, Product(Constant(-1.0), otherwise))),
    )
