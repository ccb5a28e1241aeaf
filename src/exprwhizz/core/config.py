"""
Session configuration.

Parses the [exprwhizz] table from whizz.toml and provides typed settings
for the tokenizer, the variable store and the interactive front end.

Example whizz.toml:

    [exprwhizz]
    initial_capacity = 16
    rehash_threshold = 0.5
    symbol_limit = "truncate"
    render_capacity = 256
    prompt = "> "
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from exprwhizz.core.errors import ConfigError
from exprwhizz.core.expression_lang.tokenizer import SYMBOL_MAX_LENGTH, SymbolLimit
from exprwhizz.core.variable_store import DEFAULT_CAPACITY, REHASH_THRESHOLD

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "whizz.toml"


class WhizzConfig(BaseModel):
    """Complete ExprWhizz configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)
    rehash_threshold: float = Field(default=REHASH_THRESHOLD, gt=0.0, lt=1.0)
    max_symbol_length: int = Field(default=SYMBOL_MAX_LENGTH, ge=1, le=SYMBOL_MAX_LENGTH)
    symbol_limit: SymbolLimit = SymbolLimit.SYMBOL
    render_capacity: int = Field(default=1024, ge=2)
    prompt: str = "Expr? "


def load_config(toml_path: Path | None = None) -> WhizzConfig:
    """
    Load configuration from whizz.toml.

    Args:
        toml_path: Path to the config file (default: ./whizz.toml)

    Returns:
        WhizzConfig with parsed values or defaults

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid settings.
    """
    path = toml_path if toml_path is not None else Path(CONFIG_FILENAME)
    if not path.exists():
        return WhizzConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    section = data.get("exprwhizz", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: [exprwhizz] must be a table")
    if not section:
        return WhizzConfig()

    try:
        config = WhizzConfig(**section)
    except ValidationError as e:
        raise ConfigError(f"{path}: invalid [exprwhizz] settings\n{e}") from e

    logger.info("Loaded configuration from %s", path)
    return config
