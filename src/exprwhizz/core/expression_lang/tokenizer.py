"""
Tokenizer for the ExprWhizz expression language.

Converts an expression string into a TokenStream: a FIFO of typed tokens
that the parser consumes from the front.
"""

from __future__ import annotations

import logging
import math
import re
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from exprwhizz.core.errors import SymbolTooLongError, TokenizeError

logger = logging.getLogger(__name__)

SYMBOL_MAX_LENGTH = 31


class TokenKind(StrEnum):
    """Token types; each value is the name used in error messages."""

    VALUE = "VALUE"
    SYMBOL = "SYMBOL"
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    POWER = "POWER"
    OPEN_PAREN = "OPEN_PAREN"
    CLOSE_PAREN = "CLOSE_PAREN"
    EQUAL = "EQUAL"
    END = "(end)"


class SymbolLimit(StrEnum):
    """How the tokenizer enforces the symbol length limit."""

    # Reject any input line longer than the limit (historic behaviour)
    INPUT = "input"
    # Reject a symbol once it grows past the limit
    SYMBOL = "symbol"
    # Silently drop characters past the limit
    TRUNCATE = "truncate"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer."""

    kind: TokenKind
    value: float = 0.0
    symbol: str = ""
    pos: int = field(default=0, compare=False)

    def __str__(self) -> str:
        if self.kind == TokenKind.VALUE:
            return f"{self.kind} {self.value:f}"
        if self.kind == TokenKind.SYMBOL:
            return f"{self.kind} {self.symbol}"
        return str(self.kind)


END_TOKEN = Token(TokenKind.END)


class TokenStream:
    """
    Ordered token sequence consumed destructively by the parser.

    Once exhausted the stream behaves as an endless run of END tokens:
    peek_type() keeps returning END and consume() does nothing.
    """

    def __init__(self, tokens: list[Token] | None = None) -> None:
        self._tokens: deque[Token] = deque(tokens or ())

    def peek_type(self) -> TokenKind:
        """Type of the next token, without consuming it."""
        if self._tokens:
            return self._tokens[0].kind
        return TokenKind.END

    def next(self) -> Token:
        """The next token; removal is explicit via consume()."""
        if self._tokens:
            return self._tokens[0]
        return END_TOKEN

    def consume(self) -> None:
        """Remove the front token, if any."""
        if self._tokens:
            self._tokens.popleft()

    def append(self, token: Token) -> None:
        self._tokens.append(token)

    def pop_last(self) -> Token:
        return self._tokens.pop()

    def last(self) -> Token | None:
        return self._tokens[-1] if self._tokens else None

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __repr__(self) -> str:
        return f"TokenStream({list(self._tokens)!r})"


# strtod-compatible lexemes; an incomplete exponent or hex prefix is left
# for the next token.
_HEX_RE = re.compile(
    r"0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
)
_DECIMAL_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULTIPLY,
    "/": TokenKind.DIVIDE,
    "^": TokenKind.POWER,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "=": TokenKind.EQUAL,
}

# Characters that may follow "++" / "--" for it to act as increment/decrement
_MATH_SIGNS = frozenset("+-*/^")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_symbol_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


def tokenize(
    source: str,
    *,
    symbol_limit: SymbolLimit = SymbolLimit.SYMBOL,
    max_symbol_length: int = SYMBOL_MAX_LENGTH,
) -> TokenStream:
    """
    Tokenize an expression string into a TokenStream.

    Args:
        source: Expression text (e.g. "x = 2 ^ (1.5 * 2)")
        symbol_limit: Policy for symbols longer than max_symbol_length
        max_symbol_length: Maximum number of characters in a symbol, at most
            SYMBOL_MAX_LENGTH since tree symbols never hold more

    Returns:
        The tokens, without a trailing END token.

    Raises:
        TokenizeError: On a character that starts no token.
        SymbolTooLongError: When the symbol length limit is exceeded.
        ValueError: If max_symbol_length is outside 1..SYMBOL_MAX_LENGTH.
    """
    if not 1 <= max_symbol_length <= SYMBOL_MAX_LENGTH:
        raise ValueError(f"max_symbol_length must be between 1 and {SYMBOL_MAX_LENGTH}")
    if symbol_limit == SymbolLimit.INPUT and len(source) > max_symbol_length:
        raise SymbolTooLongError("symbol too long", 1)

    tokens = TokenStream()
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c.isspace():
            i += 1
            continue

        # Numbers
        if _is_digit(c) or (c == "." and i + 1 < n and _is_digit(source[i + 1])):
            i = _read_number(source, i, tokens)
            continue

        # Symbols
        if _is_alpha(c):
            i = _read_symbol(source, i, tokens, symbol_limit, max_symbol_length)
            continue

        # Increment / decrement folded into the preceding value
        if c in "+-" and _is_step(source, i, tokens):
            prev = tokens.pop_last()
            step = 1.0 if c == "+" else -1.0
            tokens.append(Token(TokenKind.VALUE, value=prev.value + step, pos=prev.pos))
            i += 2
            continue

        kind = _SINGLE_CHAR_TOKENS.get(c)
        if kind is not None:
            tokens.append(Token(kind, pos=i))
            i += 1
            continue

        raise TokenizeError(f"unexpected character {c}", i + 1, c)

    if logger.isEnabledFor(logging.DEBUG):
        for pos, tok in enumerate(tokens):
            logger.debug("token %d: %s", pos, tok)

    return tokens


def _read_number(source: str, start: int, tokens: TokenStream) -> int:
    """Append a VALUE token for the longest numeric lexeme at start."""
    m = _HEX_RE.match(source, start)
    if m is not None:
        try:
            value = float.fromhex(m.group(0))
        except OverflowError:
            value = math.inf
    else:
        m = _DECIMAL_RE.match(source, start)
        assert m is not None
        value = float(m.group(0))

    tokens.append(Token(TokenKind.VALUE, value=value, pos=start))
    return m.end()


def _read_symbol(
    source: str,
    start: int,
    tokens: TokenStream,
    symbol_limit: SymbolLimit,
    max_symbol_length: int,
) -> int:
    """Append a SYMBOL token starting at start, applying the length policy."""
    i = start
    n = len(source)
    while i < n and _is_symbol_char(source[i]):
        if i - start == max_symbol_length:
            if symbol_limit == SymbolLimit.SYMBOL:
                raise SymbolTooLongError("symbol too long", i + 1)
            if symbol_limit == SymbolLimit.TRUNCATE:
                # Skip the rest of the symbol
                end = i
                while end < n and _is_symbol_char(source[end]):
                    end += 1
                tokens.append(Token(TokenKind.SYMBOL, symbol=source[start:i], pos=start))
                return end
            # INPUT mode already bounded the whole line
        i += 1

    tokens.append(Token(TokenKind.SYMBOL, symbol=source[start:i], pos=start))
    return i


def _is_step(source: str, i: int, tokens: TokenStream) -> bool:
    """True when source[i:i+2] is '++' or '--' acting on the preceding value."""
    prev = tokens.last()
    if prev is None or prev.kind != TokenKind.VALUE:
        return False
    if source[i + 1 : i + 2] != source[i]:
        return False
    follower = source[i + 2 : i + 3]
    return follower == "" or follower in _MATH_SIGNS
