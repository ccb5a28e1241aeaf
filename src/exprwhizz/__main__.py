"""Allow running ExprWhizz as ``python -m exprwhizz``."""

from exprwhizz.cli import main

main()
