"""
CLI Build Command

Build a Merkle tree over a file and report its root.

Usage:
    blocktree build data.bin [--block-size N] [--reverse] [--leaves] [--json] [--snapshot]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from blocktree.config import RuntimeConfig
from blocktree.merkle import MerkleTree
from blocktree.schemas.snapshot import TreeSnapshot


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    path: str = ""
    block_size: int = 0
    reverse: bool = False
    algorithm: str = ""
    root: str | None = None
    leaf_count: int = 0
    node_count: int = 0
    height: int = 0
    leaves: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["leaves"]:
            del d["leaves"]
        return d


def resolve_block_size(args: Namespace, config: RuntimeConfig) -> int:
    """Command-line block size, falling back to the configured one."""
    block_size = getattr(args, "block_size", None)
    return block_size if block_size is not None else config.tree.block_size


def build_tree_from_path(
    path: Path,
    config: RuntimeConfig,
    block_size: int,
    reverse: bool = False,
) -> MerkleTree:
    """Open ``path`` and build a tree over it, forward or from its end."""
    tree = MerkleTree(config.new_hasher())
    logger.info(f"Building tree for {path} (block_size={block_size}, reverse={reverse})")
    with open(path, "rb") as f:
        if reverse:
            tree.build_reverse(f, block_size)
        else:
            tree.build(f, block_size)
    return tree


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"path: {summary.path}")
    print(f"algorithm: {summary.algorithm}")
    print(f"block_size: {summary.block_size}")
    print(f"reverse: {str(summary.reverse).lower()}")
    print(f"root: {summary.root or '(empty)'}")
    print(f"leaves: {summary.leaf_count}")
    print(f"nodes: {summary.node_count}")
    print(f"height: {summary.height}")
    for leaf in summary.leaves:
        print(f"  [{leaf['start']}, {leaf['end']}) {leaf['checksum']}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: RuntimeConfig = args.runtime_config
    path = Path(args.path)

    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    block_size = resolve_block_size(args, config)
    tree = build_tree_from_path(path, config, block_size, reverse=args.reverse)

    if args.snapshot:
        print(TreeSnapshot.from_tree(tree, config.tree.hash_algorithm).to_json(indent=2))
        return EXIT_SUCCESS

    summary = BuildSummary(
        path=str(path),
        block_size=block_size,
        reverse=args.reverse,
        algorithm=config.tree.hash_algorithm,
        root=tree.root_checksum,
        leaf_count=tree.leaf_count,
        node_count=tree.node_count,
        height=tree.height,
    )
    if args.leaves:
        summary.leaves = [
            {"start": leaf.start_offset, "end": leaf.end_offset, "checksum": leaf.checksum}
            for leaf in tree.leaves()
        ]

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
