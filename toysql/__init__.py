"""SQL syntax tree, result sets and query execution operators."""

__version__ = "0.1.0"