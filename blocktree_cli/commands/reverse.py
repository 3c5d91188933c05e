"""
CLI Reverse Command

Stream a file through the reverse seek reader.

Usage:
    blocktree reverse app.log [--out FILE] [--buffer-size N] [--forward]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from blocktree.config import RuntimeConfig
from blocktree.streams import ReverseSeekReader, read_forward


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def reverse_cmd(args: Namespace) -> int:
    """Execute the reverse command."""
    config: RuntimeConfig = args.runtime_config
    path = Path(args.path)

    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    buffer_size = args.buffer_size if args.buffer_size is not None else config.reader.buffer_size
    if buffer_size <= 0:
        print(f"Error: buffer size must be positive, got {buffer_size}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    out = open(args.out, "wb") if args.out else sys.stdout.buffer
    total = 0
    try:
        with open(path, "rb") as f:
            if args.forward:
                data = read_forward(f, buffer_size)
                out.write(data)
                total = len(data)
            else:
                reader = ReverseSeekReader(f)
                while True:
                    chunk = reader.read(buffer_size)
                    if not chunk:
                        break
                    out.write(chunk)
                    total += len(chunk)
        out.flush()
    finally:
        if args.out:
            out.close()

    logger.info(f"Wrote {total} bytes from {path}")
    return EXIT_SUCCESS
