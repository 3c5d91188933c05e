"""
CLI command modules.
"""

from blocktree_cli.commands import build, lookup, reverse

__all__ = ["build", "lookup", "reverse"]
