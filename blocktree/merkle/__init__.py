"""
Block Merkle tree.

Build a Merkle tree over fixed-size blocks of a byte stream, look nodes
up by checksum and prove a node's inclusion under the root.

Canonical Rules:
1. Leaf checksum: hex(hash(block))
2. Parent checksum: hex(hash(left_hex || right_hex))
3. Odd level: the last node is carried forward unchanged
4. Empty stream: no root, empty index
5. Single leaf: root = leaf

Usage:
    from blocktree.merkle import merklefy
    from blocktree.crypto import default_hasher

    with open(path, "rb") as f:
        tree = merklefy(f, default_hasher(), block_size=4096)

    matches = tree.lookup(checksum)
"""
from .node import Node
from .levels import build_leaves, pair_level, reduce_levels
from .locking import ReadWriteLock
from .merkle_tree import (
    Index,
    MerkleTree,
    iter_preorder,
    build_index,
    merklefy,
    reverse_merklefy,
)
from .merkle_proofs import (
    ProofStep,
    MerkleProof,
    build_node_proof,
    compute_proof_root,
    verify_node_proof,
)


__all__ = [
    # Core types
    "Node",
    "Index",
    "MerkleTree",
    "ReadWriteLock",
    # Construction
    "build_leaves",
    "pair_level",
    "reduce_levels",
    "build_index",
    "iter_preorder",
    "merklefy",
    "reverse_merklefy",
    # Proofs
    "ProofStep",
    "MerkleProof",
    "build_node_proof",
    "compute_proof_root",
    "verify_node_proof",
]
