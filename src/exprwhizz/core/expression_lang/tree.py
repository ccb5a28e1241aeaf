"""
Construction and inspection of ExprWhizz expression trees.

Constructors (value, symbol, node) build the IR nodes; count, depth and
render walk an existing tree without modifying it.
"""

from __future__ import annotations

import math

from exprwhizz.core.errors import ExpressionTooDeepError
from exprwhizz.core.expression_lang.tokenizer import SYMBOL_MAX_LENGTH
from exprwhizz.core.ir.expressions import (
    BinaryExpr,
    Expr,
    ExprOp,
    Symbol,
    UnaryNegate,
    Value,
)

TRUNCATION_MARKER = "$"

# Integral floats below this magnitude render without a trailing ".0"
_INTEGRAL_RENDER_LIMIT = 2.0**53


def value(v: float) -> Value:
    """Create a leaf holding a numeric literal."""
    return Value(value=v)


def symbol(name: str) -> Symbol:
    """Create a leaf referencing a variable; names are capped at 31 characters."""
    return Symbol(name=name[:SYMBOL_MAX_LENGTH])


def node(op: ExprOp, left: Expr, right: Expr | None = None) -> UnaryNegate | BinaryExpr:
    """
    Create an interior node.

    NEGATE takes exactly one operand (right must be None); every other
    operator takes two. Violating this is a programming error.

    Raises:
        ValueError: If the operand count does not match the operator.
    """
    if op == ExprOp.NEGATE:
        if left is None or right is not None:
            raise ValueError("NEGATE takes exactly one operand")
        return UnaryNegate(operand=left)

    if left is None or right is None:
        raise ValueError(f"operator {op.value!r} requires two operands")
    return BinaryExpr(op=op, left=left, right=right)


def count(tree: Expr) -> int:
    """Number of nodes in the tree, leaves and interior nodes alike."""
    if isinstance(tree, (Value, Symbol)):
        return 1
    if isinstance(tree, UnaryNegate):
        return 1 + count(tree.operand)
    return 1 + count(tree.left) + count(tree.right)


def depth(tree: Expr) -> int:
    """Length of the longest root-to-leaf path; a single leaf has depth 1."""
    if isinstance(tree, (Value, Symbol)):
        return 1
    if isinstance(tree, UnaryNegate):
        return 1 + depth(tree.operand)
    return 1 + max(depth(tree.left), depth(tree.right))


def format_number(v: float) -> str:
    """Shortest text that reads back as v; integral values drop the '.0'."""
    if math.isfinite(v) and v.is_integer() and abs(v) < _INTEGRAL_RENDER_LIMIT:
        return str(int(v))
    return repr(v)


def render(tree: Expr, capacity: int | None = None) -> str:
    """
    Render the tree in canonical, fully parenthesized form.

    Examples:
        6.5 * (4 + 3)  ->  "(6.5 * (4 + 3))"
        -(-0.125)      ->  "(-(-0.125))"

    Args:
        tree: Root of the expression tree
        capacity: Optional output buffer size, counting a terminator. When
            the rendering needs more than capacity - 1 characters, the first
            capacity - 2 are kept and followed by the truncation marker '$'.

    Returns:
        The rendered text, never longer than capacity - 1 characters.

    Raises:
        ExpressionTooDeepError: If the tree is nested beyond the recursion limit.
    """
    parts: list[str] = []
    try:
        _render_into(tree, parts)
    except RecursionError:
        raise ExpressionTooDeepError() from None
    text = "".join(parts)

    if capacity is None or len(text) < capacity:
        return text
    if capacity <= 1:
        return ""
    return text[: capacity - 2] + TRUNCATION_MARKER


def _render_into(tree: Expr, out: list[str]) -> None:
    if isinstance(tree, Value):
        out.append(format_number(tree.value))
    elif isinstance(tree, Symbol):
        out.append(tree.name)
    elif isinstance(tree, UnaryNegate):
        out.append("(-")
        _render_into(tree.operand, out)
        out.append(")")
    else:
        out.append("(")
        _render_into(tree.left, out)
        out.append(f" {tree.op.value} ")
        _render_into(tree.right, out)
        out.append(")")
