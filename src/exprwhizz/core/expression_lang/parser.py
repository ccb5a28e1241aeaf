"""
Recursive descent parser for the ExprWhizz expression language.

Grammar (precedence low to high):
    assignment     → additive ("=" assignment)*
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → exponential (("*"|"/") exponential)*
    exponential    → primary ("^" exponential)?
    primary        → VALUE | SYMBOL | "(" assignment ")" | "-" primary

"^" and "=" are right-associative (the rule recurses on its right side);
"+ - * /" are left-associative (a loop folds onto the running left operand).
"""

from __future__ import annotations

import logging

from exprwhizz.core.errors import (
    ExpressionTooDeepError,
    MissingCloseParenError,
    TrailingTokenError,
    UnexpectedTokenError,
)
from exprwhizz.core.expression_lang.tokenizer import (
    SYMBOL_MAX_LENGTH,
    SymbolLimit,
    TokenKind,
    TokenStream,
    tokenize,
)
from exprwhizz.core.expression_lang.tree import count, node, symbol, value
from exprwhizz.core.ir.expressions import Expr, ExprOp

logger = logging.getLogger(__name__)

_ADDITIVE_OPS: dict[TokenKind, ExprOp] = {
    TokenKind.PLUS: ExprOp.ADD,
    TokenKind.MINUS: ExprOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, ExprOp] = {
    TokenKind.MULTIPLY: ExprOp.MUL,
    TokenKind.DIVIDE: ExprOp.DIV,
}


class _Parser:
    """Recursive descent parser over a destructively consumed TokenStream."""

    def __init__(self, tokens: TokenStream) -> None:
        self.tokens = tokens

    # -- Grammar rules --

    def parse_assignment(self) -> Expr:
        """additive ('=' assignment)*"""
        expr = self.parse_additive()
        while self.tokens.peek_type() == TokenKind.EQUAL:
            self.tokens.consume()
            right = self.parse_assignment()
            expr = node(ExprOp.ASSIGN, expr, right)
        return expr

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        left = self.parse_multiplicative()
        while self.tokens.peek_type() in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self.tokens.peek_type()]
            self.tokens.consume()
            right = self.parse_multiplicative()
            left = node(op, left, right)
        return left

    def parse_multiplicative(self) -> Expr:
        """exponential (('*' | '/') exponential)*"""
        left = self.parse_exponential()
        while self.tokens.peek_type() in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self.tokens.peek_type()]
            self.tokens.consume()
            right = self.parse_exponential()
            left = node(op, left, right)
        return left

    def parse_exponential(self) -> Expr:
        """primary ('^' exponential)?"""
        base = self.parse_primary()
        if self.tokens.peek_type() == TokenKind.POWER:
            self.tokens.consume()
            exponent = self.parse_exponential()
            return node(ExprOp.POWER, base, exponent)
        return base

    def parse_primary(self) -> Expr:
        """VALUE | SYMBOL | '(' assignment ')' | '-' primary"""
        tok = self.tokens.next()

        if tok.kind == TokenKind.VALUE:
            self.tokens.consume()
            return value(tok.value)

        if tok.kind == TokenKind.SYMBOL:
            self.tokens.consume()
            return symbol(tok.symbol)

        if tok.kind == TokenKind.OPEN_PAREN:
            self.tokens.consume()
            expr = self.parse_assignment()
            if self.tokens.peek_type() != TokenKind.CLOSE_PAREN:
                raise MissingCloseParenError(self.tokens.peek_type())
            self.tokens.consume()
            return expr

        if tok.kind == TokenKind.MINUS:
            self.tokens.consume()
            operand = self.parse_primary()
            return node(ExprOp.NEGATE, operand)

        raise UnexpectedTokenError(tok.kind)


def parse(tokens: TokenStream) -> Expr:
    """Parse a token stream into an expression tree.

    The stream is consumed as parsing proceeds; re-tokenize to parse again.

    Args:
        tokens: Output of tokenize()

    Returns:
        Root of the parsed expression tree.

    Raises:
        UnexpectedTokenError: If a primary cannot start with the current token.
        MissingCloseParenError: If a '(' is not matched by ')'.
        TrailingTokenError: If tokens remain after a complete expression.
        ExpressionTooDeepError: If nesting exceeds the recursion limit.
    """
    try:
        expr = _Parser(tokens).parse_assignment()
    except RecursionError:
        raise ExpressionTooDeepError() from None

    # Ensure all tokens consumed
    if tokens.peek_type() != TokenKind.END:
        raise TrailingTokenError(tokens.peek_type())

    if logger.isEnabledFor(logging.DEBUG):
        try:
            logger.debug("Parsed expression with %d nodes", count(expr))
        except RecursionError:
            raise ExpressionTooDeepError() from None
    return expr


def parse_expr(
    source: str,
    *,
    symbol_limit: SymbolLimit = SymbolLimit.SYMBOL,
    max_symbol_length: int = SYMBOL_MAX_LENGTH,
) -> Expr:
    """Tokenize and parse an expression string.

    Args:
        source: Expression string (e.g., "x = 6.5 * (4 + 3)")
        symbol_limit: Passed to tokenize()
        max_symbol_length: Passed to tokenize()

    Raises:
        TokenizeError: If tokenization fails.
        ExpressionParseError: If the expression is invalid.
        ExpressionTooDeepError: If the expression is nested too deeply.
    """
    tokens = tokenize(source, symbol_limit=symbol_limit, max_symbol_length=max_symbol_length)
    return parse(tokens)
