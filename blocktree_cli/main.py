"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m blocktree_cli build <path> [--block-size N] [--reverse] [--leaves] [--json] [--snapshot]
    python -m blocktree_cli lookup <path> <checksum> [--block-size N] [--reverse] [--json]
    python -m blocktree_cli reverse <path> [--out PATH] [--buffer-size N] [--forward]
    python -m blocktree_cli config --show

Environment Variables:
    BLOCKTREE_BLOCK_SIZE        Bytes per leaf block (default: 1024)
    BLOCKTREE_HASH_ALGORITHM    hashlib algorithm (default: blake2b)
    BLOCKTREE_DIGEST_SIZE       Digest size for blake2b/blake2s (default: 32)
    BLOCKTREE_READ_BUFFER       Reverse reader buffer size (default: 4096)
    BLOCKTREE_LOG_LEVEL         Log level (default: INFO)
    BLOCKTREE_LOG_FILE          Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from blocktree.config import RuntimeConfig
from blocktree.schemas.errors import BlockTreeException
from blocktree_cli.commands import build, lookup, reverse


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_NO_MATCH = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def load_runtime_config(config_path: Path | None) -> RuntimeConfig:
    """YAML file (if given) with environment overrides on top."""
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()
    return RuntimeConfig.from_env()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="blocktree",
        description="Build block Merkle trees over files and look up checksums.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree over a file and print its root",
        description="Split a file into blocks, build the Merkle tree and report it.",
    )
    build_parser.add_argument("path", type=str, help="File to hash")
    build_parser.add_argument(
        "--block-size", "-b",
        type=int,
        default=None,
        help="Bytes per leaf block (default: from config)",
    )
    build_parser.add_argument(
        "--reverse",
        action="store_true",
        default=False,
        help="Read the file from its end through the reverse seek reader",
    )
    build_parser.add_argument(
        "--leaves",
        action="store_true",
        default=False,
        help="List every leaf range and checksum",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--snapshot",
        action="store_true",
        default=False,
        help="Output the whole tree as JSON",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- lookup command ---
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Find the ranges that produced a checksum",
        description="Build the tree over a file and list every node matching a checksum.",
    )
    lookup_parser.add_argument("path", type=str, help="File to hash")
    lookup_parser.add_argument("checksum", type=str, help="Hex checksum to look up")
    lookup_parser.add_argument(
        "--block-size", "-b",
        type=int,
        default=None,
        help="Bytes per leaf block (default: from config)",
    )
    lookup_parser.add_argument(
        "--reverse",
        action="store_true",
        default=False,
        help="Read the file from its end through the reverse seek reader",
    )
    lookup_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    lookup_parser.set_defaults(func=lookup.lookup_cmd)

    # --- reverse command ---
    reverse_parser = subparsers.add_parser(
        "reverse",
        help="Stream a file through the reverse seek reader",
        description="Read a file from its end in power-of-two chunks and write what the reader yields.",
    )
    reverse_parser.add_argument("path", type=str, help="File to read")
    reverse_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    reverse_parser.add_argument(
        "--buffer-size",
        type=int,
        default=None,
        help="Read buffer size (default: from config)",
    )
    reverse_parser.add_argument(
        "--forward",
        action="store_true",
        default=False,
        help="Restore the original byte order before writing",
    )
    reverse_parser.set_defaults(func=reverse.reverse_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
        description="Display configuration after file and environment overrides.",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: blocktree config --show")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=no lookup match)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except BlockTreeException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
