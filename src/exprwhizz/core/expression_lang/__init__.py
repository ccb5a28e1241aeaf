"""
ExprWhizz expression language.

Tokenizer, parser, tree operations and evaluator for arithmetic
expressions with variable assignment.

Usage:
    from exprwhizz.core.expression_lang import evaluate, parse_expr, render
    from exprwhizz.core.variable_store import VariableStore

    variables = VariableStore()
    tree = parse_expr("x = 6.5 * (4 + 3)")
    evaluate(tree, variables)   # 45.5
    render(tree)                # "(x = (6.5 * (4 + 3)))"
"""

from exprwhizz.core.expression_lang.evaluator import evaluate
from exprwhizz.core.expression_lang.parser import parse, parse_expr
from exprwhizz.core.expression_lang.tokenizer import (
    SymbolLimit,
    Token,
    TokenKind,
    TokenStream,
    tokenize,
)
from exprwhizz.core.expression_lang.tree import count, depth, node, render, symbol, value

__all__ = [
    "SymbolLimit",
    "Token",
    "TokenKind",
    "TokenStream",
    "count",
    "depth",
    "evaluate",
    "node",
    "parse",
    "parse_expr",
    "render",
    "symbol",
    "tokenize",
    "value",
]
