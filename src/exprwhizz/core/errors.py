"""
Error types for ExprWhizz tokenizing, parsing, evaluation, and storage.

Every error raised in response to user input derives from WhizzError so
the session layer can recover from it and move on to the next line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exprwhizz.core.expression_lang.tokenizer import TokenKind


class WhizzError(Exception):
    """Base exception for all ExprWhizz errors."""

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the 1-based source position if available."""
        if self.position is not None and not self.message.startswith("Position "):
            return f"Position {self.position}: {self.message}"
        return self.message


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class TokenizeError(WhizzError):
    """
    Raised when the input text cannot be tokenized.

    Examples:
    - A character that starts no token (``3 $ 4``)
    """

    def __init__(self, message: str, position: int, character: str = ""):
        self.character = character
        super().__init__(message, position)


class SymbolTooLongError(TokenizeError):
    """Raised when a symbol (or, in ``input`` mode, the whole line) is too long."""


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class ExpressionParseError(WhizzError):
    """Base class for errors raised by the recursive descent parser."""

    def __init__(self, message: str, token_kind: TokenKind | None = None):
        self.token_kind = token_kind
        super().__init__(message)


class UnexpectedTokenError(ExpressionParseError):
    """A primary expression cannot start with the current token."""

    def __init__(self, token_kind: TokenKind):
        super().__init__(f"Unexpected token {token_kind.value}", token_kind)


class MissingCloseParenError(ExpressionParseError):
    """An opening parenthesis was never closed."""

    def __init__(self, token_kind: TokenKind | None = None):
        super().__init__("Expected ')'", token_kind)


class TrailingTokenError(ExpressionParseError):
    """Tokens remain after a complete expression was parsed."""

    def __init__(self, token_kind: TokenKind):
        super().__init__(f"Syntax error on token {token_kind.value}", token_kind)


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class ExpressionEvalError(WhizzError):
    """Base class for errors raised while evaluating an expression tree."""

    def __init__(self, message: str):
        super().__init__(message)


class UndefinedVariableError(ExpressionEvalError):
    """A symbol was read before anything was assigned to it."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable: {name}")


class InvalidAssignmentTargetError(ExpressionEvalError):
    """The left side of ``=`` is not a symbol."""

    def __init__(self) -> None:
        super().__init__("Left side of assignment must be a symbol")


class ExpressionTooDeepError(WhizzError):
    """
    Raised when a tree is nested beyond what the recursive walks can handle.

    Parsing, evaluation and rendering all recurse once per nesting level,
    so inputs like a thousand unary minuses hit the interpreter's
    recursion limit.
    """

    def __init__(self) -> None:
        super().__init__("expression nested too deeply")


# ---------------------------------------------------------------------------
# Variable store and configuration
# ---------------------------------------------------------------------------


class VariableNotFoundError(WhizzError):
    """Raised when deleting a key the store does not hold."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"cannot delete key [{key}] not found")


class StoreCorruptionError(WhizzError):
    """Raised by VariableStore.verify() when counters and slots disagree."""


class ConfigError(WhizzError):
    """Raised when whizz.toml cannot be read or holds invalid values."""
