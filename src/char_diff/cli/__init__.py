"""Command line interface for char-diff."""
