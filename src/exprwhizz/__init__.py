"""
ExprWhizz - an arithmetic expression interpreter with variables.

Tokenizer, recursive descent parser, expression trees and an
open-addressing variable store, plus a small interactive front end.
"""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core.config import WhizzConfig, load_config
from .core.errors import (
    ConfigError,
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTooDeepError,
    InvalidAssignmentTargetError,
    MissingCloseParenError,
    StoreCorruptionError,
    SymbolTooLongError,
    TokenizeError,
    TrailingTokenError,
    UndefinedVariableError,
    UnexpectedTokenError,
    VariableNotFoundError,
    WhizzError,
)
from .core.expression_lang import (
    SymbolLimit,
    Token,
    TokenKind,
    TokenStream,
    count,
    depth,
    evaluate,
    node,
    parse,
    parse_expr,
    render,
    symbol,
    tokenize,
    value,
)
from .core.ir import ExprOp
from .core.session import LineResult, ResultKind, Session
from .core.variable_store import VariableStore


def _get_version() -> str:
    """Installed distribution version; a bare source checkout reads pyproject.toml."""
    try:
        return _metadata_version("exprwhizz")
    except PackageNotFoundError:
        pass

    pyproject = _Path(__file__).resolve().parents[2] / "pyproject.toml"
    if not pyproject.is_file():
        return "0.0.0"
    with open(pyproject, "rb") as f:
        return str(tomllib.load(f)["project"]["version"])


__version__ = _get_version()

__all__ = [
    "__version__",
    # Errors
    "ConfigError",
    "ExpressionEvalError",
    "ExpressionParseError",
    "ExpressionTooDeepError",
    "InvalidAssignmentTargetError",
    "MissingCloseParenError",
    "StoreCorruptionError",
    "SymbolTooLongError",
    "TokenizeError",
    "TrailingTokenError",
    "UndefinedVariableError",
    "UnexpectedTokenError",
    "VariableNotFoundError",
    "WhizzError",
    # Expression language
    "ExprOp",
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
    # Store, config, session
    "LineResult",
    "ResultKind",
    "Session",
    "VariableStore",
    "WhizzConfig",
    "load_config",
]
