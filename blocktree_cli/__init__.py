"""
blocktree CLI

Command-line interface for building and querying block Merkle trees.

Usage:
    python -m blocktree_cli build data.bin --block-size 4096
    python -m blocktree_cli lookup data.bin <checksum>
    python -m blocktree_cli reverse app.log --out app.rev
    python -m blocktree_cli config --show
"""

__version__ = "0.1.0"
