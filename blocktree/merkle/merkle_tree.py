"""
Block Merkle Tree

Builds a Merkle tree over a byte stream split into fixed-size blocks and
indexes every node by checksum so callers can find which block(s) or
subtree(s) produced a given digest.

This module provides:
- MerkleTree: build / build_reverse / lookup / traverse
- merklefy / reverse_merklefy: one-call construction helpers
- iter_preorder / build_index: the walk shared by indexing and traversal

Lifecycle:
- The index is absent until a build completes; lookup before that raises
  NotIndexedError
- A build publishes its root and index together, only on success; a
  failed rebuild leaves the previous tree untouched
- An empty stream builds successfully into an empty, indexed tree

Concurrency:
- Built trees are read-only; lookups and traversals take a shared lock
- Publishing a build and swapping the hasher take the exclusive lock
- Builds are serialised per tree and per hasher instance, so one hasher
  is never used by two builds at once, even across trees
"""
from __future__ import annotations

import logging
import threading
from typing import BinaryIO, Callable, Iterator, Optional

from blocktree.crypto.hashing import ChecksumHasher, default_hasher, hasher_lock
from blocktree.merkle.levels import build_leaves, reduce_levels
from blocktree.merkle.locking import ReadWriteLock
from blocktree.merkle.node import Node
from blocktree.schemas.errors import NilSourceError, NotIndexedError
from blocktree.streams.reverse_reader import ReverseSeekReader


logger = logging.getLogger(__name__)

Index = dict[str, list[Node]]


def iter_preorder(root: Optional[Node]) -> Iterator[Node]:
    """Yield every node under ``root``: self, then left subtree, then right."""
    if root is None:
        return
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.right_child is not None:
            stack.append(node.right_child)
        if node.left_child is not None:
            stack.append(node.left_child)


def build_index(root: Optional[Node]) -> Index:
    """
    Map each checksum to the nodes carrying it, in pre-order discovery order.

    Raises:
        EmptyChecksumError: If a node without a checksum is found
    """
    index: Index = {}
    for node in iter_preorder(root):
        node.consistent()
        index.setdefault(node.checksum, []).append(node)
    return index


class MerkleTree:
    """
    Merkle tree over fixed-size blocks of a byte stream.

    Example:
        >>> tree = MerkleTree()
        >>> tree.build(BytesIO(b"a" * 10 + b"b" * 10), block_size=10)
        >>> [n.span for n in tree.lookup(checksum_of(b"a" * 10))]
        [(0, 10)]
    """

    def __init__(self, hasher: Optional[ChecksumHasher] = None) -> None:
        self._lock = ReadWriteLock()
        self._build_lock = threading.Lock()
        self._hasher = hasher
        self._root: Optional[Node] = None
        self._index: Optional[Index] = None
        self._block_size: Optional[int] = None
        self._leaf_count = 0

    # ------------------------------------------------------------------
    # Hasher handle
    # ------------------------------------------------------------------

    @property
    def hasher(self) -> ChecksumHasher:
        """The tree's checksum primitive; BLAKE2b-256 unless one was set."""
        with self._lock.read_locked():
            if self._hasher is not None:
                return self._hasher
        with self._lock.write_locked():
            if self._hasher is None:
                self._hasher = default_hasher()
            return self._hasher

    def set_hasher(self, hasher: ChecksumHasher) -> None:
        """Replace the checksum primitive used by future builds."""
        with self._lock.write_locked():
            self._hasher = hasher

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def build(self, source: Optional[BinaryIO], block_size: int) -> None:
        """
        Build the tree from a forward-readable source.

        Args:
            source: Readable binary stream
            block_size: Bytes per leaf block

        Raises:
            NilSourceError: If source is None
            InvalidBlockSizeError: If block_size is not positive
            EmptyChecksumError: If the finished tree fails its consistency walk
            OSError/ValueError: Read errors from the source, unchanged
        """
        with self._build_lock:
            hasher = self.hasher
            with hasher_lock(hasher):
                leaves = build_leaves(source, hasher, block_size)
                root = reduce_levels(leaves, hasher)
            index = build_index(root)

            with self._lock.write_locked():
                self._root = root
                self._index = index
                self._block_size = block_size
                self._leaf_count = len(leaves)

        logger.info(
            "built merkle tree: %d leaves, %d nodes, root=%s",
            len(leaves),
            sum(len(nodes) for nodes in index.values()),
            root.checksum if root is not None else None,
        )

    def build_reverse(self, source: Optional[BinaryIO], block_size: int) -> None:
        """
        Build the tree from ``source`` read end-to-start through a
        ReverseSeekReader.

        Raises:
            NilSourceError: If source is None
        """
        if source is None:
            raise NilSourceError()
        self.build(ReverseSeekReader(source), block_size)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def root(self) -> Optional[Node]:
        with self._lock.read_locked():
            return self._root

    @property
    def root_checksum(self) -> Optional[str]:
        root = self.root
        return root.checksum if root is not None else None

    @property
    def is_indexed(self) -> bool:
        with self._lock.read_locked():
            return self._index is not None

    @property
    def block_size(self) -> Optional[int]:
        with self._lock.read_locked():
            return self._block_size

    @property
    def leaf_count(self) -> int:
        with self._lock.read_locked():
            return self._leaf_count

    @property
    def node_count(self) -> int:
        with self._lock.read_locked():
            if self._index is None:
                return 0
            return sum(len(nodes) for nodes in self._index.values())

    @property
    def height(self) -> int:
        """Levels from the root down to the deepest leaf; 0 for an empty tree."""
        root = self.root
        if root is None:
            return 0
        deepest = 0
        stack: list[tuple[Node, int]] = [(root, 1)]
        while stack:
            node, depth = stack.pop()
            deepest = max(deepest, depth)
            for child in (node.left_child, node.right_child):
                if child is not None:
                    stack.append((child, depth + 1))
        return deepest

    def lookup(self, checksum: str) -> list[Node]:
        """
        All nodes whose checksum equals ``checksum``, in pre-order order.

        Returns:
            Matching leaves and/or internal nodes; empty when nothing matches

        Raises:
            NotIndexedError: If no build has completed yet
        """
        with self._lock.read_locked():
            if self._index is None:
                raise NotIndexedError()
            return list(self._index.get(checksum, ()))

    def traverse(self, visit: Optional[Callable[[Node], None]]) -> None:
        """Apply ``visit`` to every node, parents before their children."""
        if visit is None:
            return
        # The node graph is immutable once published, so only the root
        # read needs the lock.
        for node in iter_preorder(self.root):
            visit(node)

    def leaves(self) -> list[Node]:
        """Leaf nodes in stream order."""
        return [node for node in iter_preorder(self.root) if node.is_leaf]

    def leaf_for_offset(self, offset: int) -> Optional[Node]:
        """The leaf whose byte range contains ``offset``, or None."""
        node = self.root
        if node is None or not node.start_offset <= offset < node.end_offset:
            return None
        while not node.is_leaf:
            left = node.left_child
            node = left if left is not None and offset < left.end_offset else node.right_child
        return node

    def __repr__(self) -> str:
        checksum = self.root_checksum
        return (
            f"MerkleTree(leaves={self.leaf_count}, "
            f"root={checksum[:12] if checksum else None})"
        )


def merklefy(
    source: Optional[BinaryIO],
    hasher: Optional[ChecksumHasher],
    block_size: int,
) -> MerkleTree:
    """
    Build a new tree from a forward-readable source.

    Concurrent calls sharing one ``hasher`` instance run their hashing one
    after another; pass a fresh hasher per call to hash in parallel.
    """
    tree = MerkleTree(hasher)
    tree.build(source, block_size)
    return tree


def reverse_merklefy(
    source: Optional[BinaryIO],
    hasher: Optional[ChecksumHasher],
    block_size: int,
) -> MerkleTree:
    """Build a new tree from a seekable source read from its end."""
    tree = MerkleTree(hasher)
    tree.build_reverse(source, block_size)
    return tree


__all__ = [
    "Index",
    "MerkleTree",
    "iter_preorder",
    "build_index",
    "merklefy",
    "reverse_merklefy",
]
