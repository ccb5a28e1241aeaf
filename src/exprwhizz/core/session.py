"""
Line-at-a-time evaluation session.

A Session owns one VariableStore for its whole lifetime and turns each
input line into a LineResult. Lines that are only a symbol, or only
"symbol = value-or-symbol", are resolved directly against the store
without parsing; everything else goes through parse/evaluate/render.

Errors in user input never escape execute(): they come back as
LineResult(kind=ERROR) with the error message and a NaN value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum

from exprwhizz.core.config import WhizzConfig
from exprwhizz.core.errors import WhizzError
from exprwhizz.core.expression_lang.evaluator import evaluate
from exprwhizz.core.expression_lang.parser import parse
from exprwhizz.core.expression_lang.tokenizer import Token, TokenKind, TokenStream, tokenize
from exprwhizz.core.expression_lang.tree import format_number, render
from exprwhizz.core.variable_store import VariableStore

logger = logging.getLogger(__name__)


class ResultKind(StrEnum):
    """What a line turned out to be."""

    EMPTY = "empty"
    EXPRESSION = "expression"
    LOOKUP = "lookup"
    ASSIGNMENT = "assignment"
    ERROR = "error"


@dataclass(frozen=True)
class LineResult:
    """Outcome of executing one input line."""

    kind: ResultKind
    text: str = ""
    value: float = math.nan

    @property
    def ok(self) -> bool:
        return self.kind != ResultKind.ERROR


class Session:
    """Evaluates input lines against a persistent VariableStore."""

    def __init__(self, config: WhizzConfig | None = None) -> None:
        self.config = config or WhizzConfig()
        self.variables = VariableStore(
            initial_capacity=self.config.initial_capacity,
            rehash_threshold=self.config.rehash_threshold,
        )

    def execute(self, line: str) -> LineResult:
        """Tokenize, then resolve a shortcut or parse and evaluate the line."""
        if not line.strip():
            return LineResult(ResultKind.EMPTY)

        try:
            tokens = tokenize(
                line,
                symbol_limit=self.config.symbol_limit,
                max_symbol_length=self.config.max_symbol_length,
            )
            if len(tokens) == 0:
                return LineResult(ResultKind.EMPTY)

            shortcut = self._shortcut(tokens)
            if shortcut is not None:
                return shortcut

            tree = parse(tokens)
            result = evaluate(tree, self.variables)
            rendered = render(tree, self.config.render_capacity)
        except WhizzError as e:
            logger.debug("Line failed: %s", e)
            return LineResult(ResultKind.ERROR, str(e))
        finally:
            if logger.isEnabledFor(logging.DEBUG):
                for entry in self.variables.dump():
                    logger.debug(entry)

        return LineResult(ResultKind.EXPRESSION, f"{rendered} ==> {format_number(result)}", result)

    def _shortcut(self, tokens: TokenStream) -> LineResult | None:
        """Handle 'symbol' and 'symbol = value|symbol' lines; None otherwise."""
        kinds = [tok.kind for tok in tokens]

        if kinds == [TokenKind.SYMBOL]:
            name = tokens[0].symbol
            if not self.variables.contains(name):
                return LineResult(ResultKind.ERROR, f"Unknown variable '{name}'")
            current = self.variables.retrieve(name)
            return LineResult(
                ResultKind.LOOKUP, f"Variable '{name}' is {format_number(current)}", current
            )

        if (
            len(kinds) == 3
            and kinds[0] == TokenKind.SYMBOL
            and kinds[1] == TokenKind.EQUAL
            and kinds[2] in (TokenKind.VALUE, TokenKind.SYMBOL)
        ):
            return self._assign(tokens[0].symbol, tokens[2])

        return None

    def _assign(self, name: str, source: Token) -> LineResult:
        if source.kind == TokenKind.SYMBOL:
            if not self.variables.contains(source.symbol):
                return LineResult(ResultKind.ERROR, f"Unknown variable '{source.symbol}'")
            new_value = self.variables.retrieve(source.symbol)
        else:
            new_value = source.value

        self.variables.store(name, new_value)
        return LineResult(
            ResultKind.ASSIGNMENT, f"Variable '{name}' set to {format_number(new_value)}", new_value
        )
