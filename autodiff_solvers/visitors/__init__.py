"""
Operations over term graphs, implemented as visitors.

Each visitor handles the term kinds it supports; new operations are added
here without touching the term classes.
"""

from autodiff_solvers.visitors.base import MemoizingVisitor, TermVisitor
from autodiff_solvers.visitors.collector import VariableCollector, collect_variables
from autodiff_solvers.visitors.compiler import CompiledTerm, TapeEntry, TermCompiler, compile_term
from autodiff_solvers.visitors.evaluator import Evaluator, evaluate
from autodiff_solvers.visitors.printer import TermPrinter

__all__ = [
    "TermVisitor",
    "MemoizingVisitor",
    "Evaluator",
    "evaluate",
    "TermPrinter",
    "VariableCollector",
    "collect_variables",
    "TermCompiler",
    "TapeEntry",
    "CompiledTerm",
    "compile_term",
]
