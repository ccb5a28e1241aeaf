"""
ExprWhizz intermediate representation.

The expression tree produced by the parser and consumed by the evaluator
and the printer.
"""

from .expressions import BinaryExpr, Expr, ExprOp, Symbol, UnaryNegate, Value

__all__ = [
    "BinaryExpr",
    "Expr",
    "ExprOp",
    "Symbol",
    "UnaryNegate",
    "Value",
]
