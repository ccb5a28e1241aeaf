"""
ExprWhizz CLI - Entry point.

Commands:
- repl: interactive calculator loop
- eval: evaluate expressions given on the command line
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from exprwhizz import __version__
from exprwhizz.core.config import load_config
from exprwhizz.core.errors import ConfigError
from exprwhizz.core.session import LineResult, ResultKind, Session

app = typer.Typer(
    help="ExpressionWhizz: evaluate arithmetic expressions with variables.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exprwhizz {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """ExpressionWhizz calculator."""


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _make_session(config_path: Path | None) -> Session:
    try:
        return Session(load_config(config_path))
    except ConfigError as e:
        err_console.print(str(e), style="red", markup=False, highlight=False)
        raise typer.Exit(2)


def _show(result: LineResult) -> None:
    if result.kind == ResultKind.EMPTY:
        return
    if result.kind == ResultKind.ERROR:
        err_console.print(result.text, style="red", markup=False, highlight=False)
    else:
        console.print(result.text, markup=False, highlight=False)


def _variables_table(session: Session) -> Table:
    table = Table(title="Variables")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    session.variables.for_each(lambda key, val: table.add_row(key, f"{val:g}"))
    return table


@app.command(name="repl")
def repl_command(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to whizz.toml (default: ./whizz.toml)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Log tokens and store state"),
) -> None:
    """Start the interactive calculator. Type 'quit' or press Ctrl-D to leave."""
    _setup_logging(debug)
    session = _make_session(config)

    console.print("Welcome to ExpressionWhizz!")
    while True:
        try:
            line = console.input(f"\n{session.config.prompt}")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        if line.strip().lower() == "quit":
            break
        _show(session.execute(line))


@app.command(name="eval")
def eval_command(
    expressions: list[str] = typer.Argument(..., help="Expressions, evaluated in order"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to whizz.toml (default: ./whizz.toml)"
    ),
    show_vars: bool = typer.Option(False, "--vars", help="Print variables when done"),
    debug: bool = typer.Option(False, "--debug", help="Log tokens and store state"),
) -> None:
    """Evaluate each expression in one shared session."""
    _setup_logging(debug)
    session = _make_session(config)

    failed = False
    for line in expressions:
        result = session.execute(line)
        _show(result)
        failed = failed or not result.ok

    if show_vars:
        console.print(_variables_table(session))

    if failed:
        raise typer.Exit(1)


def main() -> None:
    app()
