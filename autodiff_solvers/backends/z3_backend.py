"""
Z3 SMT solver backend for autodiff-solvers.

This module implements the Z3Solver class that translates term graphs
to Z3 real arithmetic through Z3TermTranslator.
"""

from __future__ import annotations

from fractions import Fraction
from functools import reduce
from operator import add, mul
from typing import TYPE_CHECKING, Any, Sequence

from z3 import (
    And,
    If,
    Implies,
    Not,
    Optimize,
    Or,
    Real,
    RealVal,
    Solver,
    Z3Exception,
    is_algebraic_value,
    is_bool,
    is_rational_value,
    sat,
    unsat,
)

from autodiff_solvers.backends.base import BaseSolver, ProblemDescriptor, SolverResult
from autodiff_solvers.terms import Constant, Power, Variable
from autodiff_solvers.visitors import MemoizingVisitor, evaluate

if TYPE_CHECKING:
    from autodiff_solvers.terms import (
        Abs,
        And as AndTerm,
        LTConstraint,
        LTEConstraint,
        Max,
        Min,
        Not as NotTerm,
        Or as OrTerm,
        Product,
        Reification,
        Sum,
        Term,
        TermPower,
    )


def _real_val(value: float) -> Any:
    """Exact Z3 rational for a Python float."""
    frac = Fraction(repr(float(value)))
    return RealVal(f"{frac.numerator}/{frac.denominator}")


class Z3TermTranslator(MemoizingVisitor):
    """
    Translate terms to Z3 expressions.

    Comparisons and logic become Z3 booleans; arithmetic becomes Z3 reals.
    Each Reification becomes a fresh real r constrained by
    ``condition -> r == max`` and ``negated_condition -> r == min``; those
    constraints are collected in side_constraints. Sin, Cos, Exp, Log and
    non-integer powers raise NotImplementedError.
    """

    def __init__(self, backend: Z3Solver):
        super().__init__()
        self._backend = backend
        self.side_constraints: list[Any] = []

    def arith(self, term: Term) -> Any:
        """Translate term as a real; booleans map to 1/0."""
        expr = self.visit(term)
        if is_bool(expr):
            return If(expr, RealVal(1), RealVal(0))
        return expr

    def boolean(self, term: Term) -> Any:
        """Translate term as a boolean; reals hold when positive."""
        expr = self.visit(term)
        if is_bool(expr):
            return expr
        return expr > 0

    # ========== Leaves ==========

    def visit_constant(self, term: Constant) -> Any:
        return _real_val(term.value)

    def visit_variable(self, term: Variable) -> Any:
        return self._backend.create_variable(term.id).handle

    # ========== Arithmetic ==========

    def visit_sum(self, term: Sum) -> Any:
        return reduce(add, [self.arith(t) for t in term.terms])

    def visit_product(self, term: Product) -> Any:
        return self.arith(term.left) * self.arith(term.right)

    def visit_power(self, term: Power) -> Any:
        exponent = term.exponent
        if not exponent.is_integer():
            raise NotImplementedError("Z3 backend only supports integer exponents")
        base = self.arith(term.base)
        n = int(abs(exponent))
        result = reduce(mul, [base] * n) if n > 0 else RealVal(1)
        return result if exponent >= 0 else RealVal(1) / result

    def visit_term_power(self, term: TermPower) -> Any:
        if isinstance(term.exponent, Constant):
            return self.visit_power(Power(term.base, term.exponent.value))
        raise NotImplementedError("Z3 backend only supports constant exponents")

    def visit_abs(self, term: Abs) -> Any:
        a = self.arith(term.arg)
        return If(a >= 0, a, -a)

    def visit_max(self, term: Max) -> Any:
        a, b = self.arith(term.left), self.arith(term.right)
        return If(a >= b, a, b)

    def visit_min(self, term: Min) -> Any:
        a, b = self.arith(term.left), self.arith(term.right)
        return If(a <= b, a, b)

    # ========== Comparisons and logic ==========

    def visit_lt(self, term: LTConstraint) -> Any:
        return self.arith(term.left) < self.arith(term.right)

    def visit_lte(self, term: LTEConstraint) -> Any:
        return self.arith(term.left) <= self.arith(term.right)

    def visit_and(self, term: AndTerm) -> Any:
        return And(self.boolean(term.left), self.boolean(term.right))

    def visit_or(self, term: OrTerm) -> Any:
        return Or(self.boolean(term.left), self.boolean(term.right))

    def visit_not(self, term: NotTerm) -> Any:
        return Not(self.boolean(term.arg))

    def visit_reification(self, term: Reification) -> Any:
        r = self._backend.new_aux_real_var("reify")
        self.side_constraints.append(
            Implies(self.boolean(term.condition), r == _real_val(term.max))
        )
        self.side_constraints.append(
            Implies(self.boolean(term.negated_condition), r == _real_val(term.min))
        )
        return r


class Z3Solver(BaseSolver):
    """
    Z3 SMT backend.

    Descriptor constraints and variable domains are asserted together;
    with at least one utility, get_solution() maximizes their sum.
    An empty query is trivially satisfiable.
    """

    def __init__(
        self,
        time_limit: float | None = None,
        verbose: int = 0,
        options: str = "",
    ):
        super().__init__(time_limit, verbose, options)

        # Auxiliary variable counter
        self._aux_counter = 0

    def _make_handle(self, variable_id: int) -> Any:
        return Real(f"x{variable_id}")

    def new_aux_real_var(self, name_hint: str = "aux") -> Any:
        """Create an auxiliary real variable."""
        self._aux_counter += 1
        return Real(f"{name_hint}_{self._aux_counter}")

    # ========== Queries ==========

    def exists_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
    ) -> bool:
        try:
            solver = Solver()
            self._encode(solver, variables, descriptors)
            return self._check(solver) == sat
        except (Z3Exception, NotImplementedError, ValueError, ArithmeticError) as e:
            self._log(1, f"Z3 backend failed: {e}")
            return False

    def get_solution(
        self,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
        results: list[SolverResult],
    ) -> bool:
        has_utility = any(d.utility is not None for d in descriptors)
        try:
            solver = Optimize() if has_utility else Solver()
            utilities = self._encode(solver, variables, descriptors)
            if has_utility:
                solver.maximize(reduce(add, utilities))
                self._log(1, f"  Objective: maximize {len(utilities)} utilities")
            if self._check(solver) != sat:
                return False

            model = solver.model()
            collected = []
            for descriptor in descriptors:
                scope = self._query_variables(variables, [descriptor])
                values = {v.id: self._value(model, v.id) for v in scope}
                utility = None
                if descriptor.utility is not None:
                    utility = evaluate(descriptor.utility, values)
                collected.append(SolverResult(descriptor, values, utility))
        except (Z3Exception, NotImplementedError, ValueError, ArithmeticError) as e:
            self._log(1, f"Z3 backend failed: {e}")
            return False

        results[:] = collected
        return True

    # ========== Encoding ==========

    def _encode(
        self,
        solver: Any,
        variables: Sequence[Variable],
        descriptors: Sequence[ProblemDescriptor],
    ) -> list[Any]:
        """Assert every descriptor on solver; return the translated utilities."""
        translator = Z3TermTranslator(self)
        for v in self._query_variables(variables, descriptors):
            self.create_variable(v.id)

        utilities = []
        for descriptor in descriptors:
            for var_id, (lower, upper) in descriptor.domains.items():
                handle = self.create_variable(var_id).handle
                solver.add(handle >= _real_val(lower), handle <= _real_val(upper))
            if descriptor.constraint is not None:
                solver.add(translator.boolean(descriptor.constraint))
            if descriptor.utility is not None:
                utilities.append(translator.arith(descriptor.utility))
            self._log(2, f"Encoded descriptor {descriptor.name or '<unnamed>'}")

        for constraint in translator.side_constraints:
            solver.add(constraint)
        return utilities

    def _check(self, solver: Any) -> Any:
        if self.time_limit:
            solver.set("timeout", int(self.time_limit * 1000))
        for key, value in self._parse_options().items():
            solver.set(key, value)

        self._log(1, "Starting Z3 solver...")
        self._log(1, f"  Variables: {len(self.vars)}")
        self._log(1, f"  Assertions: {len(solver.assertions())}")

        result = solver.check()
        if result == sat:
            self._log(1, "Solver finished: SAT")
        elif result == unsat:
            self._log(1, "Solver finished: UNSAT")
        else:
            self._log(1, f"Solver finished: UNKNOWN ({solver.reason_unknown()})")
        return result

    def _value(self, model: Any, variable_id: int) -> float:
        val = model.eval(self.vars[variable_id].handle, model_completion=True)
        if is_algebraic_value(val):
            val = val.approx(20)
        if is_rational_value(val):
            return float(val.as_fraction())
        raise ValueError(f"Cannot read a numeric value for variable {variable_id}: {val}")
