"""ExprWhizz core: expression language, variable store, configuration and session."""
