"""Tests for whizz.toml loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from exprwhizz.core.config import WhizzConfig, load_config
from exprwhizz.core.errors import ConfigError
from exprwhizz.core.expression_lang.tokenizer import SymbolLimit


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "whizz.toml"
    path.write_text(content)
    return path


class TestDefaults:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "missing.toml") == WhizzConfig()

    def test_default_values(self) -> None:
        config = WhizzConfig()
        assert config.initial_capacity == 8
        assert config.rehash_threshold == 0.6
        assert config.max_symbol_length == 31
        assert config.symbol_limit == SymbolLimit.SYMBOL
        assert config.render_capacity == 1024
        assert config.prompt == "Expr? "

    def test_file_without_section(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[other]\nname = "x"\n')
        assert load_config(path) == WhizzConfig()


class TestLoading:
    def test_all_settings(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "[exprwhizz]\n"
            "initial_capacity = 16\n"
            "rehash_threshold = 0.5\n"
            "max_symbol_length = 12\n"
            'symbol_limit = "truncate"\n'
            "render_capacity = 256\n"
            'prompt = "> "\n',
        )
        config = load_config(path)
        assert config.initial_capacity == 16
        assert config.rehash_threshold == 0.5
        assert config.max_symbol_length == 12
        assert config.symbol_limit == SymbolLimit.TRUNCATE
        assert config.render_capacity == 256
        assert config.prompt == "> "

    def test_partial_settings(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[exprwhizz]\nsymbol_limit = "input"\n')
        config = load_config(path)
        assert config.symbol_limit == SymbolLimit.INPUT
        assert config.initial_capacity == 8


class TestInvalid:
    def test_malformed_toml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[exprwhizz\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "exprwhizz = 3\n")
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(path)

    @pytest.mark.parametrize(
        "body",
        [
            "rehash_threshold = 1.5",
            "initial_capacity = 0",
            "render_capacity = 1",
            "max_symbol_length = 40",
            "max_symbol_length = 0",
            'symbol_limit = "sometimes"',
            "unknown_key = 1",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str) -> None:
        path = _write(tmp_path, f"[exprwhizz]\n{body}\n")
        with pytest.raises(ConfigError, match="invalid \\[exprwhizz\\] settings"):
            load_config(path)

    def test_config_is_frozen(self) -> None:
        config = WhizzConfig()
        with pytest.raises(ValidationError):
            config.prompt = "? "  # type: ignore[misc]

    def test_symbol_length_capped_at_tree_limit(self) -> None:
        assert WhizzConfig(max_symbol_length=31).max_symbol_length == 31
        with pytest.raises(ValidationError):
            WhizzConfig(max_symbol_length=32)
