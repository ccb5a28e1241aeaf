"""
Expression evaluator for the ExprWhizz expression language.

Walks an expression tree, reading variables from and assigning them into
a VariableStore. Does NOT use Python's eval().

Arithmetic follows IEEE-754 double semantics as C computes them:
division by zero and out-of-domain powers produce inf/nan results rather
than raising.
"""

from __future__ import annotations

import math

from exprwhizz.core.errors import (
    ExpressionEvalError,
    ExpressionTooDeepError,
    InvalidAssignmentTargetError,
    UndefinedVariableError,
)
from exprwhizz.core.ir.expressions import (
    BinaryExpr,
    Expr,
    ExprOp,
    Symbol,
    UnaryNegate,
    Value,
)
from exprwhizz.core.variable_store import VariableStore


def evaluate(expr: Expr, variables: VariableStore) -> float:
    """Evaluate an expression tree.

    Assignments store into variables, so evaluating a tree twice may give
    different results (e.g. "x = x + 1").

    Args:
        expr: Parsed expression tree.
        variables: Session variable store, read and written.

    Returns:
        The computed value.

    Raises:
        UndefinedVariableError: If a symbol has no binding.
        InvalidAssignmentTargetError: If the left side of '=' is not a symbol.
        ExpressionTooDeepError: If the tree is nested beyond the recursion limit.
    """
    try:
        return _interpret(expr, variables)
    except RecursionError:
        raise ExpressionTooDeepError() from None


def _interpret(expr: Expr, variables: VariableStore) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Value):
        return expr.value

    if isinstance(expr, Symbol):
        if not variables.contains(expr.name):
            raise UndefinedVariableError(expr.name)
        return variables.retrieve(expr.name)

    if isinstance(expr, UnaryNegate):
        return -_interpret(expr.operand, variables)

    if isinstance(expr, BinaryExpr):
        if expr.op == ExprOp.ASSIGN:
            return _interpret_assign(expr, variables)
        return _interpret_binary(expr, variables)

    raise ExpressionEvalError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_assign(expr: BinaryExpr, variables: VariableStore) -> float:
    """Evaluate the right side, bind it to the left symbol, and return it."""
    if not isinstance(expr.left, Symbol):
        raise InvalidAssignmentTargetError()

    result = _interpret(expr.right, variables)
    variables.store(expr.left.name, result)
    return result


def _interpret_binary(expr: BinaryExpr, variables: VariableStore) -> float:
    """Evaluate an arithmetic binary expression, left operand first."""
    left = _interpret(expr.left, variables)
    right = _interpret(expr.right, variables)

    if expr.op == ExprOp.ADD:
        return left + right
    if expr.op == ExprOp.SUB:
        return left - right
    if expr.op == ExprOp.MUL:
        return left * right
    if expr.op == ExprOp.DIV:
        return _divide(left, right)
    if expr.op == ExprOp.POWER:
        return _power(left, right)

    raise ExpressionEvalError(f"Unknown binary op: {expr.op}")


def _divide(left: float, right: float) -> float:
    """IEEE division: x/0 is a signed infinity, 0/0 and nan/0 are nan."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _power(base: float, exponent: float) -> float:
    """C pow(): domain errors give nan, poles and overflow give signed infinity."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            # pow(±0, negative): pole; the sign survives only for odd exponents
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan
