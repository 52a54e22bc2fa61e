"""
Expression graph for constraints and utility functions.

Example:
    from autodiff_solvers.terms import Variable, Reification, lt

    x, y = Variable(0, "x"), Variable(1, "y")
    closer = Reification(lt(x, y), 2.0, 5.0)
    utility = (x * y + closer).aggregate_constants()
    dx = utility.derivative(x)
"""

from autodiff_solvers.terms.base import (
    FALSE,
    ONE,
    TRUE,
    ZERO,
    Constant,
    Term,
    Variable,
    as_term,
    is_constant,
)
from autodiff_solvers.terms.arithmetic import (
    Abs,
    Cos,
    Exp,
    Log,
    Max,
    Min,
    Power,
    Product,
    Sin,
    Sum,
    TermPower,
)
from autodiff_solvers.terms.logic import (
    And,
    LTConstraint,
    LTEConstraint,
    Not,
    Or,
    ge,
    gt,
    holds,
    le,
    lt,
)
from autodiff_solvers.terms.reification import Reification

__all__ = [
    "Term",
    "Constant",
    "Variable",
    "TRUE",
    "FALSE",
    "ZERO",
    "ONE",
    "as_term",
    "is_constant",
    "Sum",
    "Product",
    "Power",
    "TermPower",
    "Sin",
    "Cos",
    "Exp",
    "Log",
    "Abs",
    "Max",
    "Min",
    "LTConstraint",
    "LTEConstraint",
    "And",
    "Or",
    "Not",
    "lt",
    "le",
    "gt",
    "ge",
    "holds",
    "Reification",
]
