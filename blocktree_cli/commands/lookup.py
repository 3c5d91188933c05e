"""
CLI Lookup Command

Find the blocks or subtrees of a file that produced a checksum.

Usage:
    blocktree lookup data.bin <checksum> [--block-size N] [--reverse] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from blocktree.config import RuntimeConfig
from blocktree_cli.commands.build import build_tree_from_path, resolve_block_size


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_NO_MATCH = 2


def lookup_cmd(args: Namespace) -> int:
    """Execute the lookup command."""
    config: RuntimeConfig = args.runtime_config
    path = Path(args.path)

    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    checksum = args.checksum.strip().lower()
    block_size = resolve_block_size(args, config)
    tree = build_tree_from_path(path, config, block_size, reverse=args.reverse)
    matches = tree.lookup(checksum)

    if args.json:
        print(json.dumps({
            "checksum": checksum,
            "matches": [
                {"start": n.start_offset, "end": n.end_offset, "leaf": n.is_leaf}
                for n in matches
            ],
        }, indent=2))
    elif matches:
        for n in matches:
            kind = "leaf" if n.is_leaf else "node"
            print(f"[{n.start_offset}, {n.end_offset}) {kind}")
    else:
        print(f"no match for {checksum}", file=sys.stderr)

    return EXIT_SUCCESS if matches else EXIT_NO_MATCH
