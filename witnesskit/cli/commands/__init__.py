# witnesskit/cli/commands/__init__.py
"""CLI command implementations, imported lazily by witnesskit.cli.cli."""
