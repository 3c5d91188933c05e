"""
Level construction for the block Merkle tree.

Leaves come from hashing fixed-size blocks of a byte source; levels are
then paired bottom-up until a single root remains.

Canonical Rules (Hard Contracts):
1. Leaf checksum: hex(hash(block_bytes)), hasher reset before each block
2. Parent checksum: hex(hash(left.checksum || right.checksum)) over the
   textual checksums
3. Odd rule: the last node of an odd level is carried forward unchanged,
   no synthetic parent is created for it
4. Empty input: no root
5. Single leaf: root = the leaf itself
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Sequence

from blocktree.crypto.hashing import ChecksumHasher, hash_concat_hex, to_hex
from blocktree.merkle.node import Node
from blocktree.schemas.errors import InvalidBlockSizeError, NilSourceError


logger = logging.getLogger(__name__)


def _hash_block(source: BinaryIO, block_size: int, hasher: ChecksumHasher) -> int:
    """
    Feed up to ``block_size`` bytes from ``source`` into ``hasher``.

    Short reads are retried until the block is full or the source returns
    an empty read (end of stream). Returns the number of bytes hashed.
    """
    remaining = block_size
    while remaining > 0:
        chunk = source.read(remaining)
        if not chunk:
            break
        hasher.write(chunk)
        remaining -= len(chunk)
    return block_size - remaining


def build_leaves(
    source: Optional[BinaryIO],
    hasher: ChecksumHasher,
    block_size: int,
) -> list[Node]:
    """
    Hash ``source`` block by block into leaf nodes.

    Args:
        source: Readable binary stream (anything with ``read(n)``)
        hasher: Checksum primitive, reset before every block
        block_size: Bytes per block, must be positive

    Returns:
        Leaves in stream order; empty for an empty stream

    Raises:
        NilSourceError: If source is None
        InvalidBlockSizeError: If block_size is not a positive integer
        OSError/ValueError: Read errors from the source, unchanged. The
            leaves accumulated so far are dropped.
    """
    if source is None:
        raise NilSourceError()
    if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
        raise InvalidBlockSizeError(block_size)

    leaves: list[Node] = []
    offset = 0

    while True:
        hasher.reset()
        n = _hash_block(source, block_size, hasher)
        if n <= 0:
            break
        leaves.append(
            Node(
                checksum=to_hex(hasher.digest()),
                start_offset=offset,
                end_offset=offset + n,
            )
        )
        offset += n
        if n < block_size:
            # Short block means the source hit end of stream.
            break

    logger.debug("hashed %d bytes into %d leaves (block_size=%d)", offset, len(leaves), block_size)
    return leaves


def pair_level(nodes: Sequence[Node], hasher: ChecksumHasher) -> list[Node]:
    """
    Build the next level up from ``nodes``.

    Consecutive nodes ``(i, i+1)`` become children of a new parent. When
    the count is odd the last node is appended to the next level as is.

    Example:
        [a, b, c] -> [parent(a, b), c]
    """
    parents: list[Node] = []
    i = 0
    while i < len(nodes):
        if i + 1 == len(nodes):
            parents.append(nodes[i])
            i += 1
            continue
        left, right = nodes[i], nodes[i + 1]
        checksum = hash_concat_hex(left.checksum, right.checksum, hasher)
        parents.append(Node.join(checksum, left, right))
        i += 2
    return parents


def reduce_levels(nodes: Sequence[Node], hasher: ChecksumHasher) -> Optional[Node]:
    """
    Pair levels until one node remains and return it as the root.

    Iterative so tree height never touches the recursion limit.

    Returns:
        The root node, or None when ``nodes`` is empty
    """
    if len(nodes) == 0:
        return None

    level: list[Node] = list(nodes)
    depth = 0
    while len(level) > 1:
        level = pair_level(level, hasher)
        depth += 1
        logger.debug("level %d: %d nodes", depth, len(level))

    return level[0]


__all__ = [
    "build_leaves",
    "pair_level",
    "reduce_levels",
]
