# witnesskit/cli/__init__.py
"""Command-line interface for witnesskit."""
