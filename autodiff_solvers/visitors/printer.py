from __future__ import annotations

from typing import TYPE_CHECKING

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
        Variable,
    )


def _number(value: float) -> str:
    return format(value, "g")


class TermPrinter(MemoizingVisitor):
    """Render a term graph as an infix string. Shared subterms are repeated."""

    def visit_constant(self, term: Constant) -> str:
        return _number(term.value)

    def visit_variable(self, term: Variable) -> str:
        return term.name if term.name is not None else f"x{term.id}"

    def visit_sum(self, term: Sum) -> str:
        return "(" + " + ".join(self.visit(t) for t in term.terms) + ")"

    def visit_product(self, term: Product) -> str:
        return f"({self.visit(term.left)} * {self.visit(term.right)})"

    def visit_power(self, term: Power) -> str:
        return f"({self.visit(term.base)} ** {_number(term.exponent)})"

    def visit_term_power(self, term: TermPower) -> str:
        return f"({self.visit(term.base)} ** {self.visit(term.exponent)})"

    def visit_sin(self, term: Sin) -> str:
        return f"sin({self.visit(term.arg)})"

    def visit_cos(self, term: Cos) -> str:
        return f"cos({self.visit(term.arg)})"

    def visit_exp(self, term: Exp) -> str:
        return f"exp({self.visit(term.arg)})"

    def visit_log(self, term: Log) -> str:
        return f"log({self.visit(term.arg)})"

    def visit_abs(self, term: Abs) -> str:
        return f"abs({self.visit(term.arg)})"

    def visit_max(self, term: Max) -> str:
        return f"max({self.visit(term.left)}, {self.visit(term.right)})"

    def visit_min(self, term: Min) -> str:
        return f"min({self.visit(term.left)}, {self.visit(term.right)})"

    def visit_lt(self, term: LTConstraint) -> str:
        return f"({self.visit(term.left)} < {self.visit(term.right)})"

    def visit_lte(self, term: LTEConstraint) -> str:
        return f"({self.visit(term.left)} <= {self.visit(term.right)})"

    def visit_and(self, term: And) -> str:
        return f"({self.visit(term.left)} & {self.visit(term.right)})"

    def visit_or(self, term: Or) -> str:
        return f"({self.visit(term.left)} | {self.visit(term.right)})"

    def visit_not(self, term: Not) -> str:
        return f"~{self.visit(term.arg)}"

    def visit_reification(self, term: Reification) -> str:
        return (
            f"reify({self.visit(term.condition)}, "
            f"{_number(term.min)}, {_number(term.max)})"
        )
