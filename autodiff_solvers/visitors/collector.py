from __future__ import annotations

from autodiff_solvers.terms import Term, Variable
from autodiff_solvers.visitors.base import MemoizingVisitor


class VariableCollector(MemoizingVisitor):
    """Gather the distinct Variables of one or more graphs, keyed by id."""

    def __init__(self):
        super().__init__()
        self.variables: dict[int, Variable] = {}

    def visit_variable(self, term: Variable) -> None:
        self.variables.setdefault(term.id, term)

    def generic_visit(self, term: Term) -> None:
        for child in term.children():
            self.visit(child)


def collect_variables(*terms: Term | None) -> list[Variable]:
    """Distinct Variables of the given terms, sorted by id. None is skipped."""
    collector = VariableCollector()
    for term in terms:
        if term is not None:
            collector.visit(term)
    return [collector.variables[k] for k in sorted(collector.variables)]
