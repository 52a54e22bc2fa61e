"""
Compilation of term graphs into an evaluation tape.

The compiler numbers every distinct node of a graph in post-order, so
children always precede their parents and the root is the last entry.
Visiting a node returns its integer tape index. A compiled term evaluates
with one forward sweep and computes its full gradient with one additional
reverse sweep over the same tape.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from autodiff_solvers.terms import Term, Variable, holds
from autodiff_solvers.visitors.base import MemoizingVisitor
from autodiff_solvers.visitors.collector import collect_variables

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


@dataclass(frozen=True)
class TapeEntry:
    kind: str
    args: tuple[int, ...] = ()
    payload: Any = None


class TermCompiler(MemoizingVisitor):
    """Flatten a term graph into a list of TapeEntry records."""

    def __init__(self, variables: Sequence[Variable]):
        super().__init__()
        self.tape: list[TapeEntry] = []
        self._positions = {v.id: i for i, v in enumerate(variables)}

    def _emit(self, kind: str, args: Sequence[int] = (), payload: Any = None) -> int:
        self.tape.append(TapeEntry(kind, tuple(args), payload))
        return len(self.tape) - 1

    def visit_constant(self, term: Constant) -> int:
        return self._emit("constant", payload=term.value)

    def visit_variable(self, term: Variable) -> int:
        if term.id not in self._positions:
            raise KeyError(f"Variable {term.id} is not among the compiled inputs")
        return self._emit("variable", payload=self._positions[term.id])

    def visit_sum(self, term: Sum) -> int:
        return self._emit("sum", [self.visit(t) for t in term.terms])

    def visit_product(self, term: Product) -> int:
        return self._emit("product", (self.visit(term.left), self.visit(term.right)))

    def visit_power(self, term: Power) -> int:
        return self._emit("power", (self.visit(term.base),), term.exponent)

    def visit_term_power(self, term: TermPower) -> int:
        return self._emit("term_power", (self.visit(term.base), self.visit(term.exponent)))

    def visit_sin(self, term: Sin) -> int:
        return self._emit("sin", (self.visit(term.arg),))

    def visit_cos(self, term: Cos) -> int:
        return self._emit("cos", (self.visit(term.arg),))

    def visit_exp(self, term: Exp) -> int:
        return self._emit("exp", (self.visit(term.arg),))

    def visit_log(self, term: Log) -> int:
        return self._emit("log", (self.visit(term.arg),))

    def visit_abs(self, term: Abs) -> int:
        return self._emit("abs", (self.visit(term.arg),))

    def visit_max(self, term: Max) -> int:
        return self._emit("max", (self.visit(term.left), self.visit(term.right)))

    def visit_min(self, term: Min) -> int:
        return self._emit("min", (self.visit(term.left), self.visit(term.right)))

    def visit_lt(self, term: LTConstraint) -> int:
        return self._emit("lt", (self.visit(term.left), self.visit(term.right)))

    def visit_lte(self, term: LTEConstraint) -> int:
        return self._emit("lte", (self.visit(term.left), self.visit(term.right)))

    def visit_and(self, term: And) -> int:
        return self._emit("and", (self.visit(term.left), self.visit(term.right)))

    def visit_or(self, term: Or) -> int:
        return self._emit("or", (self.visit(term.left), self.visit(term.right)))

    def visit_not(self, term: Not) -> int:
        return self._emit("not", (self.visit(term.arg),))

    def visit_reification(self, term: Reification) -> int:
        return self._emit(
            "reification", (self.visit(term.condition),), (term.min, term.max)
        )


class CompiledTerm:
    """
    A term compiled against an ordered list of input variables.

    Attributes:
        tape: Nodes in evaluation order; the root is the last entry
        variables: Inputs, in the order values and gradients use
    """

    def __init__(self, tape: list[TapeEntry], variables: Sequence[Variable]):
        self.tape = tape
        self.variables = list(variables)

    def evaluate(self, values: Sequence[float]) -> float:
        return self._forward(values)[-1]

    def differentiate(self, values: Sequence[float]) -> tuple[list[float], float]:
        """Return (gradient, value) at the given point."""
        out = self._forward(values)
        adjoint = [0.0] * len(self.tape)
        adjoint[-1] = 1.0
        gradient = [0.0] * len(self.variables)
        for index in range(len(self.tape) - 1, -1, -1):
            if adjoint[index] != 0.0:
                self._backward_step(self.tape[index], index, out, adjoint, gradient)
        return gradient, out[-1]

    # ========== Sweeps ==========

    def _forward(self, values: Sequence[float]) -> list[float]:
        if len(values) != len(self.variables):
            raise ValueError(
                f"Expected {len(self.variables)} values, got {len(values)}"
            )
        out = [0.0] * len(self.tape)
        for index, entry in enumerate(self.tape):
            out[index] = self._forward_step(entry, out, values)
        return out

    @staticmethod
    def _forward_step(entry: TapeEntry, out: list[float], values: Sequence[float]) -> float:
        kind = entry.kind
        a = [out[i] for i in entry.args]

        if kind == "constant":
            return entry.payload
        elif kind == "variable":
            return float(values[entry.payload])
        elif kind == "sum":
            return math.fsum(a)
        elif kind == "product":
            return a[0] * a[1]
        elif kind == "power":
            return math.pow(a[0], entry.payload)
        elif kind == "term_power":
            return math.pow(a[0], a[1])
        elif kind == "sin":
            return math.sin(a[0])
        elif kind == "cos":
            return math.cos(a[0])
        elif kind == "exp":
            return math.exp(a[0])
        elif kind == "log":
            return math.log(a[0])
        elif kind == "abs":
            return abs(a[0])
        elif kind == "max":
            return max(a[0], a[1])
        elif kind == "min":
            return min(a[0], a[1])
        elif kind == "lt":
            return 1.0 if a[0] < a[1] else 0.0
        elif kind == "lte":
            return 1.0 if a[0] <= a[1] else 0.0
        elif kind == "and":
            return 1.0 if holds(a[0]) and holds(a[1]) else 0.0
        elif kind == "or":
            return 1.0 if holds(a[0]) or holds(a[1]) else 0.0
        elif kind == "not":
            return 0.0 if holds(a[0]) else 1.0
        elif kind == "reification":
            low, high = entry.payload
            return high if holds(a[0]) else low
        raise NotImplementedError(f"Tape entry kind {kind} not implemented")

    @staticmethod
    def _backward_step(
        entry: TapeEntry,
        index: int,
        out: list[float],
        adjoint: list[float],
        gradient: list[float],
    ) -> None:
        kind = entry.kind
        adj = adjoint[index]
        args = entry.args

        if kind == "variable":
            gradient[entry.payload] += adj
        elif kind == "sum":
            for i in args:
                adjoint[i] += adj
        elif kind == "product":
            left, right = args
            adjoint[left] += adj * out[right]
            adjoint[right] += adj * out[left]
        elif kind == "power":
            (base,) = args
            adjoint[base] += adj * entry.payload * math.pow(out[base], entry.payload - 1.0)
        elif kind == "term_power":
            base, exponent = args
            b, e = out[base], out[exponent]
            adjoint[base] += adj * e * math.pow(b, e - 1.0)
            if b > 0.0:
                adjoint[exponent] += adj * out[index] * math.log(b)
        elif kind == "sin":
            adjoint[args[0]] += adj * math.cos(out[args[0]])
        elif kind == "cos":
            adjoint[args[0]] -= adj * math.sin(out[args[0]])
        elif kind == "exp":
            adjoint[args[0]] += adj * out[index]
        elif kind == "log":
            adjoint[args[0]] += adj / out[args[0]]
        elif kind == "abs":
            adjoint[args[0]] += adj if out[args[0]] > 0.0 else -adj
        elif kind == "max":
            left, right = args
            adjoint[right if out[left] < out[right] else left] += adj
        elif kind == "min":
            left, right = args
            adjoint[right if out[right] < out[left] else left] += adj
        # constants, comparisons, logic and reifications are flat


def compile_term(term: Term, variables: Sequence[Variable] | None = None) -> CompiledTerm:
    """
    Compile term for repeated evaluation.

    Args:
        term: Root of the graph
        variables: Input order; defaults to the term's variables sorted by id

    Returns:
        CompiledTerm bound to that input order
    """
    if variables is None:
        variables = collect_variables(term)
    compiler = TermCompiler(variables)
    compiler.visit(term)
    return CompiledTerm(compiler.tape, variables)
