"""Command-line interface for triplestore."""
